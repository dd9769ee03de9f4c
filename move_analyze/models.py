"""Data models for relocations, tracks and movement records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final


@dataclass(frozen=True, slots=True)
class RawRelocation:
    """A relocation row as parsed from the input table.

    Attributes:
        row_index: 0-based data row number in the input file.
        individual_id: Animal identifier.
        x: Easting in the input CRS, None if missing/unparseable.
        y: Northing in the input CRS, None if missing/unparseable.
        timestamp: UTC-aware datetime, None if missing/unparseable.
    """

    row_index: int
    individual_id: str
    x: float | None
    y: float | None
    timestamp: datetime | None

    @property
    def is_complete(self) -> bool:
        return self.x is not None and self.y is not None and self.timestamp is not None


@dataclass(frozen=True, slots=True)
class Relocation:
    """A complete, cleaned relocation (fix)."""

    individual_id: str
    x: float
    y: float
    timestamp: datetime
    row_index: int = 0

    @property
    def key(self) -> tuple[str, float, float, datetime]:
        """Identity used for duplicate detection."""

        return (self.individual_id, self.x, self.y, self.timestamp)


@dataclass(frozen=True, slots=True)
class Track:
    """Time-ordered relocations of one individual.

    Note:
        ``tod`` is aligned with ``relocations``; it is all None when no
        daytime classifier was applied.
    """

    individual_id: str
    relocations: tuple[Relocation, ...]
    tod: tuple[str | None, ...]

    def __len__(self) -> int:
        return len(self.relocations)


@dataclass(frozen=True, slots=True)
class MovementRecord:
    """A relocation enriched with movement metrics.

    Metric fields are None where they are undefined: the last fix has no
    successor (dir_abs, sl, dir_rel), the first fix has no predecessor
    segment (dir_rel), and a null displacement has no direction.

    Attributes:
        dir_abs: Bearing to the next fix, radians in [0, 2*pi), clockwise from north.
        dir_rel: Turning angle at this fix, radians in [-pi, pi].
        sl: Step length to the next fix, in coordinate units.
        nsd: Squared distance from the first fix of the track.
    """

    individual_id: str
    x: float
    y: float
    timestamp: datetime
    tod: str | None
    dir_abs: float | None
    dir_rel: float | None
    sl: float | None
    nsd: float


@dataclass(frozen=True, slots=True)
class CalendarFields:
    """Calendar breakdown of a UTC timestamp."""

    week: int
    month: int
    year: int
    hour: int


@dataclass(frozen=True, slots=True)
class AnnotatedRecord:
    """Output row: movement metrics plus calendar fields."""

    record: MovementRecord
    calendar: CalendarFields


DEFAULT_CRS: Final[str] = "EPSG:32618"
NA_MARKER: Final[str] = "NA"

TOD_DAY: Final[str] = "day"
TOD_NIGHT: Final[str] = "night"
TOD_DAWN: Final[str] = "dawn"
TOD_DUSK: Final[str] = "dusk"

MONTH_ABBR: Final[tuple[str, ...]] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
