"""Time parsing, calendar fields and sampling-interval statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Iterable

from move_analyze.models import MONTH_ABBR, CalendarFields


def parse_timestamp(text: str) -> datetime:
    """Parse a relocation timestamp into a UTC-aware datetime.

    Supported formats:
      - "YYYY-MM-DD HH:MM:SS"
      - "YYYY-MM-DDTHH:MM:SS"
      - with optional fractional seconds and timezone offset, e.g. "+00:00"
      - with trailing "Z"

    Timestamps without an offset are taken to be UTC.

    Args:
        text: Datetime string.

    Returns:
        Timezone-aware datetime in UTC.

    Raises:
        ValueError: If cannot parse.
    """

    s = text.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ValueError(f"无法解析时间：{text!r}。建议格式：2010-02-18 14:30:00") from exc

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_timestamp(dt: datetime) -> str:
    """Format a timestamp for export ("YYYY-MM-DD HH:MM:SS+00:00")."""

    return dt.astimezone(UTC).isoformat(sep=" ")


def week_of_year(dt: datetime) -> int:
    """Week number counted in whole 7-day blocks from January 1st.

    Week 1 is Jan 1-7, so Dec 31 falls in week 53 (week 53 has one day, or
    two in leap years). This is not the ISO week.
    """

    return (dt.timetuple().tm_yday - 1) // 7 + 1


def calendar_fields(dt: datetime) -> CalendarFields:
    """Break a timestamp into week/month/year/hour (evaluated in UTC)."""

    utc = dt.astimezone(UTC)
    return CalendarFields(
        week=week_of_year(utc),
        month=utc.month,
        year=utc.year,
        hour=utc.hour,
    )


def month_label(month: int) -> str:
    """English abbreviation of a month number (1-12)."""

    return MONTH_ABBR[month - 1]


@dataclass(frozen=True, slots=True)
class DeltaStats:
    """Sampling interval stats (seconds)."""

    count: int
    min_s: float
    median_s: float
    p95_s: float
    max_s: float


def delta_stats(timestamps_sorted: Iterable[datetime]) -> DeltaStats | None:
    """Compute basic sampling-interval statistics.

    Args:
        timestamps_sorted: Timestamps sorted ascending.

    Returns:
        DeltaStats or None if less than 2 points.
    """

    ts = list(timestamps_sorted)
    if len(ts) < 2:
        return None
    deltas = [(ts[i] - ts[i - 1]).total_seconds() for i in range(1, len(ts)) if ts[i] >= ts[i - 1]]
    if not deltas:
        return None
    deltas.sort()
    n = len(deltas)
    median = deltas[n // 2] if n % 2 == 1 else 0.5 * (deltas[n // 2 - 1] + deltas[n // 2])
    p95 = deltas[int(0.95 * (n - 1))]
    return DeltaStats(
        count=n,
        min_s=deltas[0],
        median_s=median,
        p95_s=p95,
        max_s=deltas[-1],
    )
