"""Planar geometry helpers for projected coordinates."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import MultiPoint

TWO_PI = 2.0 * math.pi


def step_length(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two fixes, in coordinate units."""

    return math.hypot(x2 - x1, y2 - y1)


def squared_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Squared Euclidean distance between two fixes."""

    dx = x2 - x1
    dy = y2 - y1
    return dx * dx + dy * dy


def bearing(x1: float, y1: float, x2: float, y2: float) -> float | None:
    """Compass bearing of the displacement from (x1, y1) to (x2, y2).

    Args:
        x1: Easting of the start point.
        y1: Northing of the start point.
        x2: Easting of the end point.
        y2: Northing of the end point.

    Returns:
        Radians in [0, 2*pi), measured clockwise from north (+y), or None
        for a null displacement (direction is undefined).
    """

    dx = x2 - x1
    dy = y2 - y1
    if dx == 0.0 and dy == 0.0:
        return None
    theta = math.atan2(dx, dy) % TWO_PI
    # -tiny % 2pi can round up to exactly 2pi
    return 0.0 if theta >= TWO_PI else theta


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into [-pi, pi] (shortest signed rotation)."""

    return math.remainder(angle, TWO_PI)


def turn_angle(bearing_in: float | None, bearing_out: float | None) -> float | None:
    """Signed change of heading between two consecutive segments.

    Positive values are clockwise turns. Returns None if either heading is
    undefined.
    """

    if bearing_in is None or bearing_out is None:
        return None
    return wrap_angle(bearing_out - bearing_in)


def hull_area(points: Sequence[tuple[float, float]]) -> float:
    """Area of the convex hull (100% minimum convex polygon) of 2D points.

    Fewer than three non-collinear points give 0.0.
    """

    if not points:
        return 0.0
    return MultiPoint(list(points)).convex_hull.area
