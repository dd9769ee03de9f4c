"""Inspect a relocation table before analysis."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from move_analyze.cleaning import CleaningReport, clean_relocations
from move_analyze.models import RawRelocation
from move_analyze.timeutils import DeltaStats, delta_stats
from move_analyze.tracks import group_by_individual


@dataclass(frozen=True, slots=True)
class IndividualOverview:
    """Per-individual fix count and sampling."""

    individual_id: str
    fixes: int
    start: datetime
    end: datetime
    delta: DeltaStats | None


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level relocation table inspection result."""

    cleaning: CleaningReport
    individuals: int
    min_time: datetime | None
    max_time: datetime | None
    min_x: float | None
    max_x: float | None
    min_y: float | None
    max_y: float | None
    duplicate_timestamps: int
    per_individual: Sequence[IndividualOverview]


def inspect_relocations(rows: Sequence[RawRelocation]) -> InspectResult:
    """Inspect already-loaded rows (after cleaning)."""

    relocations, report = clean_relocations(rows)
    if not relocations:
        return InspectResult(
            cleaning=report,
            individuals=0,
            min_time=None,
            max_time=None,
            min_x=None,
            max_x=None,
            min_y=None,
            max_y=None,
            duplicate_timestamps=0,
            per_individual=(),
        )

    per: list[IndividualOverview] = []
    dupe = 0
    for ind, rs in group_by_individual(relocations).items():
        times = sorted(r.timestamp for r in rs)
        for i in range(1, len(times)):
            if times[i] == times[i - 1]:
                dupe += 1
        per.append(
            IndividualOverview(
                individual_id=ind,
                fixes=len(rs),
                start=times[0],
                end=times[-1],
                delta=delta_stats(times),
            )
        )

    xs = [r.x for r in relocations]
    ys = [r.y for r in relocations]
    return InspectResult(
        cleaning=report,
        individuals=len(per),
        min_time=min(p.start for p in per),
        max_time=max(p.end for p in per),
        min_x=min(xs),
        max_x=max(xs),
        min_y=min(ys),
        max_y=max(ys),
        duplicate_timestamps=dupe,
        per_individual=per,
    )
