"""
Intersection detection and density aggregation.

Crease crossings are binned into grid cells; each cell accumulates the
summed weight of its crossings, the largest depth gap among them and a hit
count. A saturation ceiling compresses heavily folded sheets, and adaptive
thresholds map the resulting weights to four density levels.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import structlog

from .fold_simulator import Crease
from .geometry import Point, pairwise_segment_intersections
from .paper import PaperProperties

logger = structlog.get_logger()

CEILING_PER_CELL = 0.5
SOFT_CAP_OVERFLOW = 0.3

EMPTY_THRESHOLDS = (1.0, 2.0, 3.0, 999.0)

Cell = Tuple[int, int]  # (col, row)


class Intersection(NamedTuple):
    """Proper crossing of two creases."""

    point: Point
    crease1: int
    crease2: int
    depth1: int
    depth2: int
    gap: int
    weight: float


class Thresholds(NamedTuple):
    """Adaptive level thresholds, strictly increasing."""

    t1: float
    t2: float
    t3: float
    t_extreme: float


@dataclass
class CellDensity:
    """Per-cell aggregation of crease crossings."""

    cols: int
    rows: int
    intersections: List[Intersection] = field(default_factory=list)
    cell_weights: Dict[Cell, float] = field(default_factory=dict)
    cell_max_gap: Dict[Cell, int] = field(default_factory=dict)
    cell_counts: Dict[Cell, int] = field(default_factory=dict)
    thresholds: Thresholds = Thresholds(*EMPTY_THRESHOLDS)
    levels: Optional[np.ndarray] = None  # (rows, cols) of 0..3

    @property
    def max_gap(self) -> int:
        return max(self.cell_max_gap.values(), default=0)

    @property
    def accent_cells(self) -> List[Cell]:
        """Cells holding the deepest overlap of the whole sheet."""
        if not self.cell_max_gap:
            return []
        max_gap = self.max_gap
        return [cell for cell, gap in self.cell_max_gap.items() if gap == max_gap]

    @property
    def active_cell_count(self) -> int:
        return len(self.cell_weights)

    def level_at(self, col: int, row: int) -> int:
        return count_to_level(self.cell_weights.get((col, row), 0), self.thresholds)


def find_intersections(creases: Sequence[Crease]) -> List[Intersection]:
    """
    Every proper crossing between two creases, ordered by (i, j) with i < j.

    The crossing point is measured along the earlier crease.
    """
    if len(creases) < 2:
        return []

    p1 = np.array([[c.p1.x, c.p1.y] for c in creases], dtype=np.float64)
    p2 = np.array([[c.p2.x, c.p2.y] for c in creases], dtype=np.float64)
    ii, jj, xs, ys = pairwise_segment_intersections(p1, p2)

    intersections = []
    for i, j, x, y in zip(ii.tolist(), jj.tolist(), xs.tolist(), ys.tolist()):
        first = creases[i]
        second = creases[j]
        intersections.append(
            Intersection(
                point=Point(x, y),
                crease1=i,
                crease2=j,
                depth1=first.depth,
                depth2=second.depth,
                gap=abs(second.depth - first.depth),
                weight=(first.weight or 1) + (second.weight or 1),
            )
        )
    return intersections


def calculate_adaptive_thresholds(cell_weights: Dict[Cell, float]) -> Thresholds:
    """
    Level thresholds from the distribution of positive cell weights.

    Args:
        cell_weights: Weight per cell

    Returns:
        Thresholds with t1 < t2 < t3 < t_extreme
    """
    weights = sorted(w for w in cell_weights.values() if w > 0)
    if not weights:
        return Thresholds(*EMPTY_THRESHOLDS)

    def percentile(p: float) -> float:
        idx = math.floor(len(weights) * p)
        return weights[min(idx, len(weights) - 1)]

    # Each floor is taken from the previous raw percentile, not the clamped one
    t1 = percentile(0.7)
    t2 = percentile(0.94)
    t3 = percentile(0.94) + 1
    t_extreme = percentile(0.985)
    return Thresholds(
        max(0.01, t1),
        max(t1 + 0.01, t2),
        max(t2 + 0.01, t3),
        max(t3 + 0.01, t_extreme),
    )


def count_to_level(weight: float, thresholds: Thresholds) -> int:
    """Density level 0-3 of a cell weight."""
    if weight == 0:
        return 0
    if weight <= thresholds.t1:
        return 1
    if weight <= thresholds.t2:
        return 2
    return 3


def process_creases(
    creases: Sequence[Crease],
    cols: int,
    rows: int,
    cell_width: float,
    cell_height: float,
    paper: Optional[PaperProperties] = None,
) -> CellDensity:
    """
    Bin crease crossings into grid cells and derive density levels.

    Args:
        creases: Creases in grid-pixel space
        cols: Number of grid columns
        rows: Number of grid rows
        cell_width: Bin width, the column stride when the grid has gaps
        cell_height: Bin height, the row stride when the grid has gaps
        paper: Paper supplying the intersection threshold and ceiling
            multiplier, plain paper when omitted

    Returns:
        CellDensity
    """
    paper = paper or PaperProperties.default()

    intersections = [
        inter
        for inter in find_intersections(creases)
        if inter.weight >= paper.intersection_threshold
    ]

    density = CellDensity(cols=cols, rows=rows, intersections=intersections)
    weights = density.cell_weights
    max_gaps = density.cell_max_gap
    counts = density.cell_counts

    for inter in intersections:
        col = math.floor(inter.point.x / cell_width)
        row = math.floor(inter.point.y / cell_height)
        if 0 <= col < cols and 0 <= row < rows:
            key = (col, row)
            weights[key] = weights.get(key, 0) + inter.weight
            max_gaps[key] = max(max_gaps.get(key, 0), inter.gap)
            counts[key] = counts.get(key, 0) + 1

    ceiling = cols * rows * CEILING_PER_CELL * paper.ceiling_multiplier
    total = 0
    for weight in weights.values():
        total += weight

    if total > ceiling and total > 0:
        ratio = ceiling / total
        soft_ratio = ratio + (1 - ratio) * SOFT_CAP_OVERFLOW
        for key in weights:
            weights[key] *= soft_ratio

    density.thresholds = calculate_adaptive_thresholds(weights)

    levels = np.zeros((rows, cols), dtype=np.int8)
    for (col, row), weight in weights.items():
        levels[row, col] = count_to_level(weight, density.thresholds)
    density.levels = levels

    logger.debug(
        "Density aggregated",
        intersections=len(intersections),
        active_cells=len(weights),
        total_weight=total,
        ceiling=ceiling,
    )
    return density


def fold_target_cell(
    target: Optional[Point], stride_x: float, stride_y: float, cols: int, rows: int
) -> Optional[Cell]:
    """Grid cell holding a fold target, clamped to the grid."""
    if target is None:
        return None
    col = min(max(math.floor(target.x / stride_x), 0), cols - 1)
    row = min(max(math.floor(target.y / stride_y), 0), rows - 1)
    return (col, row)
