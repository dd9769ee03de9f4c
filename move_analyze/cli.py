"""Command-line interface for move_analyze.

Run:
    python -m move_analyze inspect --csv fisher.csv
    python -m move_analyze run --csv fisher.csv --out movement_parameter.csv --plots-dir plots
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path

from move_analyze.csv_io import ColumnMap, load_movement_records, load_relocations
from move_analyze.inspect import inspect_relocations
from move_analyze.models import DEFAULT_CRS, NA_MARKER
from move_analyze.pipeline import AnalysisConfig, analyze, run_pipeline
from move_analyze.timeutils import format_timestamp


def _columns(args: argparse.Namespace) -> ColumnMap:
    return ColumnMap(individual_id=args.id_col, x=args.x_col, y=args.y_col, timestamp=args.t_col)


def _fmt(v: float | None, digits: int = 3) -> str:
    return "NA" if v is None else f"{v:.{digits}f}"


def _cmd_inspect(args: argparse.Namespace) -> int:
    rows, summary = load_relocations(args.csv, _columns(args))
    res = inspect_relocations(rows)

    print("### CSV字段")
    print(", ".join(summary.fieldnames))
    print()

    print("### 行数")
    c = res.cleaning
    print(
        f"total_rows={c.rows_in}, incomplete={c.rows_incomplete}, "
        f"duplicates={c.rows_duplicate}, kept={c.rows_out}"
    )
    print()

    if res.min_time is not None and res.max_time is not None:
        print("### 时间范围（UTC）")
        print(f"start={format_timestamp(res.min_time)}, end={format_timestamp(res.max_time)}")
        print()

    print("### 坐标范围")
    print(f"x=[{res.min_x}, {res.max_x}], y=[{res.min_y}, {res.max_y}]")
    print()

    print("### 个体")
    for ind in res.per_individual:
        line = f"{ind.individual_id}: fixes={ind.fixes}"
        if ind.delta is not None:
            line += f", median_interval={ind.delta.median_s:.1f}s, max_interval={ind.delta.max_s:.1f}s"
        print(line)
    print()

    print("### 同一个体重复时间戳")
    print(res.duplicate_timestamps)
    print()

    if args.json:
        payload = asdict(res) | {"fieldnames": list(summary.fieldnames)}
        print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    return 0


def _config(args: argparse.Namespace) -> AnalysisConfig:
    return AnalysisConfig(
        crs=args.crs,
        include_crepuscule=args.include_crepuscule,
        columns=_columns(args),
        angle_unit="degrees" if getattr(args, "degrees", False) else "radians",
        na_marker=getattr(args, "na_marker", NA_MARKER),
        classify_daytime=not getattr(args, "no_daytime", False),
        workers=getattr(args, "workers", 1),
    )


def _cmd_run(args: argparse.Namespace) -> int:
    result = run_pipeline(args.csv, args.out, args.plots_dir, _config(args))
    c = result.cleaning
    print(
        f"清洗：输入={c.rows_in}，缺失={c.rows_incomplete}，重复={c.rows_duplicate}，保留={c.rows_out}"
    )
    print(f"个体数={len(result.tracks)}，输出点数={len(result.records)}")
    print(f"已导出：{args.out}")
    print(f"图表目录：{args.plots_dir}")
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    rows, _ = load_relocations(args.csv, _columns(args))
    cfg = AnalysisConfig(columns=_columns(args), classify_daytime=False)
    result = analyze(rows, cfg)

    fieldnames = [
        "id",
        "n_fixes",
        "start",
        "end",
        "tot_dist",
        "cum_dist",
        "straightness",
        "msd",
        "intensity_use",
        "median_interval_s",
    ]
    table = [
        {
            "id": s.individual_id,
            "n_fixes": s.n_fixes,
            "start": format_timestamp(s.start),
            "end": format_timestamp(s.end),
            "tot_dist": _fmt(s.tot_dist),
            "cum_dist": _fmt(s.cum_dist),
            "straightness": _fmt(s.straightness, 4),
            "msd": _fmt(s.msd),
            "intensity_use": _fmt(s.intensity_use, 4),
            "median_interval_s": _fmt(s.sampling.median_s if s.sampling else None, 1),
        }
        for s in result.summaries
    ]

    for row in table:
        print(
            f"{row['id']}: fixes={row['n_fixes']}, tot_dist={row['tot_dist']}, cum_dist={row['cum_dist']}, "
            f"straightness={row['straightness']}, msd={row['msd']}, intensity_use={row['intensity_use']}"
        )

    if args.out:
        p = Path(args.out)
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8", newline="") as f:
            w = csv.DictWriter(f, fieldnames=fieldnames)
            w.writeheader()
            w.writerows(table)
        print(f"已导出：{args.out}")
    return 0


def _cmd_plot(args: argparse.Namespace) -> int:
    from move_analyze.plots import render_all

    records = load_movement_records(
        args.movement,
        angle_unit="degrees" if args.degrees else "radians",
        na_marker=args.na_marker,
    )
    written = render_all(records, args.plots_dir)
    for p in written:
        print(f"已输出：{p}")
    return 0


def _add_column_args(p: argparse.ArgumentParser) -> None:
    defaults = ColumnMap()
    p.add_argument("--id-col", type=str, default=defaults.individual_id, help="个体ID列名")
    p.add_argument("--x-col", type=str, default=defaults.x, help="x（东向坐标）列名")
    p.add_argument("--y-col", type=str, default=defaults.y, help="y（北向坐标）列名")
    p.add_argument("--t-col", type=str, default=defaults.timestamp, help="时间戳列名（UTC）")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="move_analyze")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ins = sub.add_parser("inspect", help="检查定位数据的字段/缺失/重复/采样间隔")
    p_ins.add_argument("--csv", type=str, required=True, help="输入CSV路径")
    _add_column_args(p_ins)
    p_ins.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    p_ins.set_defaults(func=_cmd_inspect)

    p_run = sub.add_parser("run", help="完整流程：清洗、轨迹、移动指标、导出CSV并绘图")
    p_run.add_argument("--csv", type=str, required=True, help="输入CSV路径")
    p_run.add_argument("--out", type=str, default="movement_parameter.csv", help="输出CSV路径")
    p_run.add_argument("--plots-dir", type=str, default="plots", help="图表输出目录")
    _add_column_args(p_run)
    p_run.add_argument("--crs", type=str, default=DEFAULT_CRS, help="输入坐标的坐标系（默认 UTM 18N, EPSG:32618）")
    p_run.add_argument(
        "--include-crepuscule",
        action="store_true",
        help="单独标注晨昏（dawn/dusk），默认并入 day/night",
    )
    p_run.add_argument("--no-daytime", action="store_true", help="不计算昼夜标签")
    p_run.add_argument("--degrees", action="store_true", help="导出角度用度（默认弧度）")
    p_run.add_argument("--na-marker", type=str, default=NA_MARKER, help="未定义指标的输出标记")
    p_run.add_argument("--workers", type=int, default=1, help="并行进程数（>1 按个体并行计算）")
    p_run.set_defaults(func=_cmd_run)

    p_sum = sub.add_parser("summary", help="按个体汇总：总位移、累计距离、直线度、MSD、利用强度")
    p_sum.add_argument("--csv", type=str, required=True, help="输入CSV路径")
    _add_column_args(p_sum)
    p_sum.add_argument("--out", type=str, default=None, help="可选：汇总CSV输出路径")
    p_sum.set_defaults(func=_cmd_summary)

    p_plot = sub.add_parser("plot", help="根据已导出的 movement CSV 重新绘图")
    p_plot.add_argument("--movement", type=str, default="movement_parameter.csv", help="run 导出的CSV")
    p_plot.add_argument("--plots-dir", type=str, default="plots", help="图表输出目录")
    p_plot.add_argument("--degrees", action="store_true", help="导出文件中的角度是度")
    p_plot.add_argument("--na-marker", type=str, default=NA_MARKER, help="未定义指标的标记")
    p_plot.set_defaults(func=_cmd_plot)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
