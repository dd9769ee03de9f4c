"""Per-track movement metrics.

Every function here works on a single :class:`Track`; fixes of different
individuals are never paired.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from move_analyze.geo import bearing, hull_area, squared_distance, step_length, turn_angle
from move_analyze.models import MovementRecord, Track
from move_analyze.timeutils import DeltaStats, delta_stats

logger = logging.getLogger(__name__)


def compute_movement(track: Track) -> list[MovementRecord]:
    """Derive bearing, turning angle, step length and NSD for one track.

    For fix i (0-based, n fixes):
      - dir_abs/sl describe the step i -> i+1 and are None for i = n-1.
      - dir_rel is the change from heading (i-1 -> i) to heading (i -> i+1)
        and is None at both ends.
      - nsd is the squared distance to fix 0.

    A null step (two fixes at the same place) has sl = 0 and no heading, so
    the turning angles on both sides of it are None as well.

    Args:
        track: Time-ordered fixes of one individual.

    Returns:
        One record per fix, in track order.
    """

    pts = track.relocations
    n = len(pts)
    if n == 0:
        return []

    headings: list[float | None] = [None] * n
    steps: list[float | None] = [None] * n
    for i in range(n - 1):
        a, b = pts[i], pts[i + 1]
        steps[i] = step_length(a.x, a.y, b.x, b.y)
        headings[i] = bearing(a.x, a.y, b.x, b.y)

    x0, y0 = pts[0].x, pts[0].y
    out: list[MovementRecord] = []
    for i, p in enumerate(pts):
        rel = turn_angle(headings[i - 1], headings[i]) if 0 < i < n - 1 else None
        out.append(
            MovementRecord(
                individual_id=p.individual_id,
                x=p.x,
                y=p.y,
                timestamp=p.timestamp,
                tod=track.tod[i],
                dir_abs=headings[i],
                dir_rel=rel,
                sl=steps[i],
                nsd=squared_distance(x0, y0, p.x, p.y),
            )
        )
    return out


def compute_all(tracks: Sequence[Track], workers: int = 1) -> list[MovementRecord]:
    """Compute movement records for every track and concatenate them.

    Args:
        tracks: Tracks to process.
        workers: Process count; >1 processes tracks in parallel. The output
            order is the track order either way.
    """

    if workers > 1 and len(tracks) > 1:
        with ProcessPoolExecutor(max_workers=min(workers, len(tracks))) as executor:
            per_track = list(executor.map(compute_movement, tracks))
    else:
        per_track = [compute_movement(t) for t in tracks]

    out: list[MovementRecord] = []
    for records in per_track:
        out.extend(records)
    logger.info("移动指标计算完成：%s 条轨迹，%s 个点", len(tracks), len(out))
    return out


@dataclass(frozen=True, slots=True)
class TrackSummary:
    """Whole-track movement characteristics.

    Attributes:
        tot_dist: Straight-line distance between the first and last fix.
        cum_dist: Sum of step lengths.
        straightness: tot_dist / cum_dist, None if the animal never moved.
        msd: Mean squared distance of the fixes from their centroid.
        intensity_use: cum_dist / sqrt(MCP area), None if the hull has no area.
    """

    individual_id: str
    n_fixes: int
    start: datetime
    end: datetime
    tot_dist: float
    cum_dist: float
    straightness: float | None
    msd: float
    intensity_use: float | None
    sampling: DeltaStats | None


def mcp_area(track: Track) -> float:
    """Area of the 100% minimum convex polygon of a track."""

    return hull_area([(p.x, p.y) for p in track.relocations])


def summarize_track(track: Track) -> TrackSummary:
    """Summarize one non-empty track."""

    pts = track.relocations
    if not pts:
        raise ValueError(f"轨迹 {track.individual_id!r} 没有任何点")

    first, last = pts[0], pts[-1]
    tot = step_length(first.x, first.y, last.x, last.y)
    cum = math.fsum(step_length(a.x, a.y, b.x, b.y) for a, b in zip(pts, pts[1:]))

    cx = math.fsum(p.x for p in pts) / len(pts)
    cy = math.fsum(p.y for p in pts) / len(pts)
    msd = math.fsum(squared_distance(cx, cy, p.x, p.y) for p in pts) / len(pts)

    area = mcp_area(track)
    return TrackSummary(
        individual_id=track.individual_id,
        n_fixes=len(pts),
        start=first.timestamp,
        end=last.timestamp,
        tot_dist=tot,
        cum_dist=cum,
        straightness=tot / cum if cum > 0 else None,
        msd=msd,
        intensity_use=cum / math.sqrt(area) if area > 0 else None,
        sampling=delta_stats(p.timestamp for p in pts),
    )
