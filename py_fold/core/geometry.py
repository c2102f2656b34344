"""
Planar geometry for the crease simulation.

Points live in grid-pixel space with the origin at the top-left corner of
the grid and y growing downwards.
"""

import math
from enum import Enum
from typing import NamedTuple, Optional, Sequence

import numpy as np

from . import fdlibm

# Edge ids, clockwise from the top
EDGE_TOP = 0
EDGE_RIGHT = 1
EDGE_BOTTOM = 2
EDGE_LEFT = 3

# Corner ids, clockwise from the top-left
CORNER_TOP_LEFT = 0
CORNER_TOP_RIGHT = 1
CORNER_BOTTOM_RIGHT = 2
CORNER_BOTTOM_LEFT = 3

PARALLEL_EPSILON = 0.0001
SEGMENT_T_MIN = 0.001
SEGMENT_T_MAX = 0.999


class PointType(str, Enum):
    """Where a crease endpoint sits."""

    EDGE = "edge"
    CORNER = "corner"
    CREASE = "crease"
    INTERSECTION = "intersection"


class Point(NamedTuple):
    """2D point."""

    x: float
    y: float


class SegmentHit(NamedTuple):
    """Proper crossing of two segments with the parameter on each."""

    point: Point
    t: float
    u: float


def distance(a: Point, b: Point) -> float:
    """Euclidean distance."""
    dx = a.x - b.x
    dy = a.y - b.y
    return math.sqrt(dx * dx + dy * dy)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def lerp(a: Point, b: Point, t: float) -> Point:
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def segment_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> Optional[SegmentHit]:
    """
    Intersect segments a1-a2 and b1-b2.

    Only crossings strictly inside both segments count: both parameters must
    lie in [0.001, 0.999], so shared or touching endpoints are ignored, and
    (near-)parallel segments never intersect.

    Returns:
        SegmentHit or None
    """
    d1x = a2.x - a1.x
    d1y = a2.y - a1.y
    d2x = b2.x - b1.x
    d2y = b2.y - b1.y
    cross = d1x * d2y - d1y * d2x
    if abs(cross) < PARALLEL_EPSILON:
        return None

    dpx = b1.x - a1.x
    dpy = b1.y - a1.y
    t = (dpx * d2y - dpy * d2x) / cross
    u = (dpx * d1y - dpy * d1x) / cross

    if SEGMENT_T_MIN <= t <= SEGMENT_T_MAX and SEGMENT_T_MIN <= u <= SEGMENT_T_MAX:
        return SegmentHit(Point(a1.x + d1x * t, a1.y + d1y * t), t, u)
    return None


def point_to_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Distance from a point to the closest point of a segment."""
    dx = end.x - start.x
    dy = end.y - start.y
    len_sq = dx * dx + dy * dy

    if len_sq == 0:
        return distance(point, start)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / len_sq
    t = clamp(t, 0, 1)

    return distance(point, Point(start.x + t * dx, start.y + t * dy))


def crease_angle(p1: Point, p2: Point) -> float:
    """Undirected angle of a segment in degrees, in [0, 180)."""
    angle = fdlibm.atan2(p2.y - p1.y, p2.x - p1.x) * 180 / math.pi
    if angle < 0:
        angle += 180
    if angle >= 180:
        angle -= 180
    return angle


def angle_difference(a: float, b: float) -> float:
    """Smallest difference between two undirected angles, in [0, 90]."""
    diff = abs(a - b)
    if diff > 90:
        diff = 180 - diff
    return diff


def edge_point(edge: int, t: float, width: float, height: float) -> Point:
    """
    Point at parameter t along a canvas edge.

    Bottom and left edges run backwards so that the boundary is walked
    clockwise.
    """
    if edge == EDGE_RIGHT:
        return Point(width, t * height)
    if edge == EDGE_BOTTOM:
        return Point((1 - t) * width, height)
    if edge == EDGE_LEFT:
        return Point(0, (1 - t) * height)
    return Point(t * width, 0)


def corner_point(corner: int, width: float, height: float) -> Point:
    if corner == CORNER_TOP_RIGHT:
        return Point(width, 0)
    if corner == CORNER_BOTTOM_RIGHT:
        return Point(width, height)
    if corner == CORNER_BOTTOM_LEFT:
        return Point(0, height)
    return Point(0, 0)


def is_vertical_edge(edge: int) -> bool:
    return edge == EDGE_RIGHT or edge == EDGE_LEFT


def weighted_random_index(weights: Sequence[float], rng) -> int:
    """
    Roulette-wheel pick.

    Draws once from ``rng`` unless the weights sum to zero or less, in which
    case index 0 is returned without drawing.
    """
    total = 0.0
    for w in weights:
        total += w
    if total <= 0:
        return 0
    r = rng() * total
    for i, w in enumerate(weights):
        r -= w
        if r <= 0:
            return i
    return len(weights) - 1


def segment_intersect_arrays(a1x, a1y, a2x, a2y, b1x, b1y, b2x, b2y):
    """
    Vectorized ``segment_intersect`` over broadcastable coordinate arrays.

    Uses the same operations in the same order as the scalar version, so
    every hit point is bit-identical to what ``segment_intersect`` returns.

    Returns:
        Tuple of (hit mask, x, y); x and y are only meaningful where the mask
        is set.
    """
    d1x = a2x - a1x
    d1y = a2y - a1y
    d2x = b2x - b1x
    d2y = b2y - b1y
    cross = d1x * d2y - d1y * d2x

    dpx = b1x - a1x
    dpy = b1y - a1y
    # Parallel pairs divide by zero; the mask drops them
    with np.errstate(divide="ignore", invalid="ignore"):
        t = (dpx * d2y - dpy * d2x) / cross
        u = (dpx * d1y - dpy * d1x) / cross

        hit = (
            (np.abs(cross) >= PARALLEL_EPSILON)
            & (t >= SEGMENT_T_MIN)
            & (t <= SEGMENT_T_MAX)
            & (u >= SEGMENT_T_MIN)
            & (u <= SEGMENT_T_MAX)
        )
        return hit, a1x + d1x * t, a1y + d1y * t


def pairwise_segment_intersections(p1: np.ndarray, p2: np.ndarray):
    """
    All proper crossings among n segments, tested for every pair i < j.

    Args:
        p1: (n, 2) array of segment start points
        p2: (n, 2) array of segment end points

    Returns:
        Tuple of (i, j, x, y) arrays ordered by i, then j. The hit point is
        measured along segment i.
    """
    n = len(p1)
    if n < 2:
        empty_i = np.zeros(0, dtype=np.int64)
        empty_f = np.zeros(0, dtype=np.float64)
        return empty_i, empty_i, empty_f, empty_f

    i, j = np.triu_indices(n, k=1)
    hit, x, y = segment_intersect_arrays(
        p1[i, 0], p1[i, 1], p2[i, 0], p2[i, 1],
        p1[j, 0], p1[j, 1], p2[j, 0], p2[j, 1],
    )
    return i[hit], j[hit], x[hit], y[hit]
