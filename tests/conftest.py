"""Shared fixtures for move_analyze tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from move_analyze.models import Relocation, Track

T0 = datetime(2010, 2, 11, 12, 0, tzinfo=UTC)


def make_relocations(
    individual_id: str,
    coords: list[tuple[float, float]],
    start: datetime = T0,
    step: timedelta = timedelta(minutes=10),
    first_row: int = 0,
) -> list[Relocation]:
    return [
        Relocation(individual_id=individual_id, x=x, y=y, timestamp=start + i * step, row_index=first_row + i)
        for i, (x, y) in enumerate(coords)
    ]


def make_track(individual_id: str, coords: list[tuple[float, float]], **kwargs) -> Track:
    pts = tuple(make_relocations(individual_id, coords, **kwargs))
    return Track(individual_id=individual_id, relocations=pts, tod=(None,) * len(pts))


@pytest.fixture
def collinear_track() -> Track:
    """(0,0) -> (1,0) -> (2,0), one step per time unit."""
    return make_track("F1", [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)])


@pytest.fixture
def fisher_csv(tmp_path: Path) -> Path:
    """Two interleaved individuals, one incomplete row and one duplicate row."""
    p = tmp_path / "fisher.csv"
    p.write_text(
        "id,x_,y_,t_\n"
        "F1,587000.0,4722000.0,2010-02-11 17:00:00\n"
        "M1,583000.0,4716000.0,2010-02-11 17:05:00\n"
        "F1,587000.0,4722100.0,2010-02-11 17:10:00\n"
        "M1,583100.0,4716000.0,2010-02-11 17:15:00\n"
        "F1,587000.0,4722200.0,2010-02-11 17:20:00\n"
        "M1,583100.0,4716100.0,2010-02-11 17:25:00\n"
        "F1,NA,4722300.0,2010-02-11 17:30:00\n"
        "M1,583100.0,4716100.0,2010-02-11 17:25:00\n",
        encoding="utf-8",
    )
    return p
