"""CSV input/output for relocation tables and movement exports."""

from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from move_analyze.models import NA_MARKER, AnnotatedRecord, CalendarFields, MovementRecord, RawRelocation
from move_analyze.timeutils import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_MISSING_TOKENS = frozenset({"", "na", "nan", "null", "none"})

MOVEMENT_FIELDNAMES: tuple[str, ...] = (
    "id",
    "x_",
    "y_",
    "t_",
    "tod_",
    "dir_abs",
    "dir_rel",
    "sl",
    "nsd",
    "week",
    "month",
    "year",
    "hour",
)


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Input column names for the four required fields."""

    individual_id: str = "id"
    x: str = "x_"
    y: str = "y_"
    timestamp: str = "t_"

    @property
    def required(self) -> tuple[str, ...]:
        return (self.individual_id, self.x, self.y, self.timestamp)


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    fieldnames: Sequence[str]


def _is_missing(value: str | None) -> bool:
    return value is None or value.strip().lower() in _MISSING_TOKENS


def _parse_float(value: str | None) -> float | None:
    if _is_missing(value):
        return None
    try:
        v = float(value.strip())
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def _parse_ts(value: str | None) -> datetime | None:
    if _is_missing(value):
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        return None


def check_schema(fieldnames: Sequence[str] | None, columns: ColumnMap) -> None:
    """Raise KeyError if any required column is absent."""

    present = list(fieldnames or ())
    missing = [c for c in columns.required if c not in present]
    if missing:
        raise KeyError(f"CSV缺少必要字段：{missing}. 实际字段：{present}")


def iter_relocations(csv_path: str | Path, columns: ColumnMap | None = None) -> Iterator[RawRelocation]:
    """Yield RawRelocation rows from a relocation CSV.

    Values that are missing or cannot be parsed are returned as None so that
    the cleaning step can count them.

    Raises:
        KeyError: If a required column is missing from the header.
    """

    cols = columns or ColumnMap()
    p = Path(csv_path)
    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        check_schema(reader.fieldnames, cols)
        for i, row in enumerate(reader):
            yield RawRelocation(
                row_index=i,
                individual_id=(row.get(cols.individual_id) or "").strip(),
                x=_parse_float(row.get(cols.x)),
                y=_parse_float(row.get(cols.y)),
                timestamp=_parse_ts(row.get(cols.timestamp)),
            )


def load_relocations(
    csv_path: str | Path, columns: ColumnMap | None = None
) -> tuple[list[RawRelocation], CsvSummary]:
    """Load all relocation rows into memory.

    Args:
        csv_path: Path to the relocation CSV.
        columns: Column names; defaults to id/x_/y_/t_.

    Returns:
        (rows, summary)
    """

    cols = columns or ColumnMap()
    p = Path(csv_path)
    with p.open("r", encoding="utf-8", newline="") as f:
        fieldnames = csv.DictReader(f).fieldnames or ()

    rows = list(iter_relocations(p, cols))
    logger.info("读取 %s：%s 行", p, len(rows))
    return rows, CsvSummary(rows_total=len(rows), fieldnames=tuple(fieldnames))


def _fmt_metric(value: float | None, na_marker: str, degrees: bool = False) -> str:
    if value is None:
        return na_marker
    return repr(math.degrees(value) if degrees else value)


def write_movement_csv(
    records: Iterable[AnnotatedRecord],
    out_path: str | Path,
    angle_unit: str = "radians",
    na_marker: str = NA_MARKER,
) -> int:
    """Export annotated movement records.

    Output columns:
        id, x_, y_, t_, tod_, dir_abs, dir_rel, sl, nsd, week, month, year, hour

    Undefined metrics (and a missing tod_) are written as ``na_marker``.

    Returns:
        Number of rows written.
    """

    if angle_unit not in ("radians", "degrees"):
        raise ValueError(f"angle_unit 只能是 radians/degrees：{angle_unit!r}")
    degrees = angle_unit == "degrees"

    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(MOVEMENT_FIELDNAMES))
        w.writeheader()
        for ann in records:
            r = ann.record
            w.writerow(
                {
                    "id": r.individual_id,
                    "x_": repr(r.x),
                    "y_": repr(r.y),
                    "t_": format_timestamp(r.timestamp),
                    "tod_": r.tod if r.tod is not None else na_marker,
                    "dir_abs": _fmt_metric(r.dir_abs, na_marker, degrees),
                    "dir_rel": _fmt_metric(r.dir_rel, na_marker, degrees),
                    "sl": _fmt_metric(r.sl, na_marker),
                    "nsd": _fmt_metric(r.nsd, na_marker),
                    "week": ann.calendar.week,
                    "month": ann.calendar.month,
                    "year": ann.calendar.year,
                    "hour": ann.calendar.hour,
                }
            )
            n += 1
    logger.info("已导出 %s 行到 %s", n, p)
    return n


def load_movement_records(
    csv_path: str | Path,
    angle_unit: str = "radians",
    na_marker: str = NA_MARKER,
) -> list[AnnotatedRecord]:
    """Read back a file written by :func:`write_movement_csv`.

    Angles are returned in radians whatever ``angle_unit`` the file used.
    """

    degrees = angle_unit == "degrees"

    def metric(value: str) -> float | None:
        if value == na_marker:
            return None
        v = _parse_float(value)
        if v is not None and degrees:
            return math.radians(v)
        return v

    out: list[AnnotatedRecord] = []
    p = Path(csv_path)
    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        missing = [c for c in MOVEMENT_FIELDNAMES if c not in (reader.fieldnames or ())]
        if missing:
            raise KeyError(f"导出文件缺少字段：{missing}. 实际字段：{reader.fieldnames}")
        for row in reader:
            nsd = metric(row["nsd"])
            if nsd is None:
                raise ValueError(f"第 {reader.line_num} 行 nsd 缺失：nsd 对每个点都有定义")
            out.append(
                AnnotatedRecord(
                    record=MovementRecord(
                        individual_id=row["id"],
                        x=float(row["x_"]),
                        y=float(row["y_"]),
                        timestamp=parse_timestamp(row["t_"]),
                        tod=None if row["tod_"] == na_marker else row["tod_"],
                        dir_abs=metric(row["dir_abs"]),
                        dir_rel=metric(row["dir_rel"]),
                        sl=metric(row["sl"]),
                        nsd=nsd,
                    ),
                    calendar=CalendarFields(
                        week=int(row["week"]),
                        month=int(row["month"]),
                        year=int(row["year"]),
                        hour=int(row["hour"]),
                    ),
                )
            )
    return out
