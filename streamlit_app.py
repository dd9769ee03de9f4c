from __future__ import annotations

import tempfile
from pathlib import Path

import matplotlib.pyplot as plt
import streamlit as st

from move_analyze.csv_io import ColumnMap, load_movement_records, load_relocations, write_movement_csv
from move_analyze.metrics import TrackSummary
from move_analyze.models import DEFAULT_CRS, AnnotatedRecord
from move_analyze.pipeline import AnalysisConfig, analyze
from move_analyze.plots import PLOTS
from move_analyze.timeutils import format_timestamp, month_label


def _na(v: float | None, digits: int = 3) -> float | None:
    return None if v is None else round(v, digits)


def _summary_rows(summaries: list[TrackSummary]) -> list[dict[str, object]]:
    return [
        {
            "id": s.individual_id,
            "fixes": s.n_fixes,
            "start": format_timestamp(s.start),
            "end": format_timestamp(s.end),
            "tot_dist": _na(s.tot_dist),
            "cum_dist": _na(s.cum_dist),
            "straightness": _na(s.straightness, 4),
            "msd": _na(s.msd),
            "intensity_use": _na(s.intensity_use, 4),
        }
        for s in summaries
    ]


def _record_rows(records: list[AnnotatedRecord], limit: int) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for a in records[:limit]:
        r = a.record
        rows.append(
            {
                "id": r.individual_id,
                "t_": format_timestamp(r.timestamp),
                "x_": r.x,
                "y_": r.y,
                "tod_": r.tod,
                "dir_abs": _na(r.dir_abs, 4),
                "dir_rel": _na(r.dir_rel, 4),
                "sl": _na(r.sl),
                "nsd": _na(r.nsd),
                "month": month_label(a.calendar.month),
                "hour": a.calendar.hour,
            }
        )
    return rows


@st.cache_data(show_spinner=False)
def _load_export(movement_csv: str, mtime: float) -> list[AnnotatedRecord]:
    _ = mtime  # part of cache key so updated files reload automatically
    return load_movement_records(movement_csv)


def main() -> None:
    st.set_page_config(page_title="移动特征探索", layout="wide")
    st.title("动物定位数据：移动特征探索")

    with st.sidebar:
        st.subheader("数据")
        mode = st.radio("数据来源", ["原始定位CSV（现场计算）", "已导出的 movement CSV"])
        path_csv = st.text_input("CSV 路径", value="sample_data/fisher.csv")

        st.subheader("设置")
        crs = st.text_input("坐标系（CRS）", value=DEFAULT_CRS)
        include_crepuscule = st.checkbox("单独标注晨昏（dawn/dusk）", value=False)
        with st.expander("列名（通常不用改）", expanded=False):
            id_col = st.text_input("个体ID列", value="id")
            x_col = st.text_input("x 列", value="x_")
            y_col = st.text_input("y 列", value="y_")
            t_col = st.text_input("时间列", value="t_")
        preview_rows = st.number_input("明细显示行数", value=500, step=100, min_value=10)

    p = Path(path_csv)
    if not p.exists():
        st.error(f"找不到文件：{path_csv!r}")
        return

    summaries: list[TrackSummary] = []
    if mode.startswith("原始"):
        cfg = AnalysisConfig(
            crs=crs,
            include_crepuscule=include_crepuscule,
            columns=ColumnMap(individual_id=id_col, x=x_col, y=y_col, timestamp=t_col),
        )
        try:
            with st.spinner("正在清洗数据并计算移动指标 ..."):
                rows, _ = load_relocations(p, cfg.columns)
                result = analyze(rows, cfg)
        except (KeyError, ValueError) as exc:
            st.exception(exc)
            return
        records = list(result.records)
        summaries = list(result.summaries)

        c = result.cleaning
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("输入行数", str(c.rows_in))
        c2.metric("缺失删除", str(c.rows_incomplete))
        c3.metric("重复删除", str(c.rows_duplicate))
        c4.metric("个体数", str(len(result.tracks)))

        if records:
            with tempfile.NamedTemporaryFile(suffix=".csv", delete=False) as tmp:
                out = Path(tmp.name)
            write_movement_csv(records, out)
            st.download_button(
                "下载 movement_parameter.csv",
                data=out.read_bytes(),
                file_name="movement_parameter.csv",
                mime="text/csv",
            )
            out.unlink(missing_ok=True)
    else:
        try:
            records = _load_export(path_csv, p.stat().st_mtime)
        except (KeyError, ValueError) as exc:
            st.exception(exc)
            return

    if not records:
        st.warning("清洗后没有剩余数据。")
        return

    if summaries:
        st.subheader("个体汇总")
        st.dataframe(_summary_rows(summaries), use_container_width=True)

    st.subheader("图表")
    for name, func in PLOTS.items():
        with st.expander(name, expanded=name == "locations_all.png"):
            fig = func(records)
            st.pyplot(fig)
            plt.close(fig)

    st.subheader("明细")
    st.dataframe(_record_rows(records, int(preview_rows)), use_container_width=True, height=520)
    st.caption("说明：sl/dir_abs 描述到下一个定位点的一步；dir_rel 为转向角（弧度，0 为直行）；空值表示未定义。")


if __name__ == "__main__":
    main()
