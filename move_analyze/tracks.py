"""Partition cleaned relocations into per-individual tracks."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from move_analyze.models import Relocation, Track

logger = logging.getLogger(__name__)

# relocation -> tod label
TodFunc = Callable[[Relocation], str | None]


def group_by_individual(relocations: Iterable[Relocation]) -> dict[str, list[Relocation]]:
    """Group relocations by individual, ids in first-appearance order."""

    groups: dict[str, list[Relocation]] = {}
    for r in relocations:
        groups.setdefault(r.individual_id, []).append(r)
    return groups


def make_track(individual_id: str, relocations: Iterable[Relocation], tod: TodFunc | None = None) -> Track:
    """Build one track sorted by time.

    Equal timestamps keep their input row order.

    Args:
        individual_id: Individual the relocations belong to.
        relocations: Relocations of that individual (any order).
        tod: Optional day/night labeller, called once per relocation.
    """

    pts = tuple(sorted(relocations, key=lambda r: (r.timestamp, r.row_index)))
    for r in pts:
        if r.individual_id != individual_id:
            raise ValueError(f"轨迹 {individual_id!r} 混入了其他个体的点：{r.individual_id!r}")
    labels = tuple(tod(r) for r in pts) if tod is not None else (None,) * len(pts)
    return Track(individual_id=individual_id, relocations=pts, tod=labels)


def build_tracks(relocations: Iterable[Relocation], tod: TodFunc | None = None) -> list[Track]:
    """Build one track per individual.

    Returns:
        Tracks in first-appearance order of the individuals. Empty input
        gives an empty list.
    """

    tracks = [make_track(ind, rs, tod) for ind, rs in group_by_individual(relocations).items()]
    logger.info("构建轨迹：%s 个个体", len(tracks))
    return tracks
