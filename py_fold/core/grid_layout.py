"""
Grid layout solver.

Cell sizes are exact divisors of the inner drawing area of the reference
canvas, so every seed produces the same grid at any output resolution.
Gaps between cells are a multiple of the cell size and may be negative,
in which case neighbouring cells overlap.
"""

import math
from dataclasses import dataclass, replace
from typing import List, NamedTuple, Optional

import structlog

from ..config import (
    CELL_ASPECT_MAX,
    CELL_MAX,
    CELL_MIN,
    CHAR_BOTTOM_OVERFLOW_DARK,
    CHAR_TOP_OVERFLOW,
    CHAR_WIDTH_RATIO,
    DRAWING_MARGIN,
    REFERENCE_HEIGHT,
    REFERENCE_WIDTH,
)
from ..utils.random import CELL_DIMENSIONS_OFFSET, GAP_OFFSET, make_stream

logger = structlog.get_logger()

FALLBACK_CELL_WIDTH = 8
FALLBACK_CELL_HEIGHT = 12

# A cell must fit one glyph: width >= height * 0.6 / 1.14
GLYPH_HEIGHT_RATIO = 1 + CHAR_TOP_OVERFLOW + CHAR_BOTTOM_OVERFLOW_DARK
MIN_WIDTH_RATIO = CHAR_WIDTH_RATIO / GLYPH_HEIGHT_RATIO

NEGATIVE_GAP_RATIOS = [-1 / 16, -1 / 8, -1 / 4, -1 / 2]

# (cumulative probability, ratio)
GAP_RATIO_TABLE = [
    (0.40, 0),
    (0.525, 1 / 64),
    (0.65, 1 / 32),
    (0.75, 1 / 16),
    (0.85, 1 / 8),
    (0.90, 1 / 4),
    (0.95, 1 / 2),
    (0.98, 1.0),
]
LARGEST_GAP_RATIO = 2.0

GAP_LABELS = [
    (-1.0, "-1 (100% overlap)"),
    (-0.5, "-1/2 (50% overlap)"),
    (-0.25, "-1/4 (25% overlap)"),
    (-0.125, "-1/8 (12.5% overlap)"),
    (-0.0625, "-1/16 (6.25% overlap)"),
    (0.015625, "1/64"),
    (0.03125, "1/32"),
    (0.0625, "1/16"),
    (0.125, "1/8"),
    (0.25, "1/4"),
    (0.5, "1/2"),
    (1.0, "1x"),
    (2.0, "2x"),
]
GAP_LABEL_TOLERANCE = 0.01


class CellSize(NamedTuple):
    """Cell size in reference pixels."""

    width: int
    height: int

    def __str__(self):
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class GridLayout:
    """Placement of the cell grid inside the inner drawing area."""

    cols: int
    rows: int
    cell_width: float
    cell_height: float
    col_gap: float
    row_gap: float
    stride_x: float
    stride_y: float
    offset_x: float
    offset_y: float
    grid_width: float
    grid_height: float

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows

    def scaled(
        self,
        output_width: float,
        output_height: float,
        reference_width: int = REFERENCE_WIDTH,
        reference_height: int = REFERENCE_HEIGHT,
    ) -> "GridLayout":
        """Pixel-space copy of the layout for an output canvas."""
        sx = output_width / reference_width
        sy = output_height / reference_height
        return replace(
            self,
            cell_width=self.cell_width * sx,
            cell_height=self.cell_height * sy,
            col_gap=self.col_gap * sx,
            row_gap=self.row_gap * sy,
            stride_x=self.stride_x * sx,
            stride_y=self.stride_y * sy,
            offset_x=self.offset_x * sx,
            offset_y=self.offset_y * sy,
            grid_width=self.grid_width * sx,
            grid_height=self.grid_height * sy,
        )


@dataclass(frozen=True)
class GapInfo:
    """Readable description of the realised gaps."""

    col_gap_ratio: float
    row_gap_ratio: float
    col_gap_category: str
    row_gap_category: str
    has_gaps: bool
    has_overlap: bool


def get_divisors(n: int, low: int, high: int) -> List[int]:
    """Divisors of ``n`` within [low, high], ascending."""
    return [i for i in range(low, high + 1) if n % i == 0]


def inner_extent(
    padding: int = 0,
    reference_width: int = REFERENCE_WIDTH,
    reference_height: int = REFERENCE_HEIGHT,
    drawing_margin: int = DRAWING_MARGIN,
):
    """Inner drawing area of the reference canvas as (width, height)."""
    return (
        reference_width - padding * 2 - drawing_margin * 2,
        reference_height - padding * 2 - drawing_margin * 2,
    )


def generate_cell_dimensions(
    padding: int,
    seed: int,
    reference_width: int = REFERENCE_WIDTH,
    reference_height: int = REFERENCE_HEIGHT,
    drawing_margin: int = DRAWING_MARGIN,
    cell_min: int = CELL_MIN,
    cell_max: int = CELL_MAX,
    cell_aspect_max: float = CELL_ASPECT_MAX,
) -> CellSize:
    """
    Pick a cell size for a seed.

    Candidate sizes are divisor pairs of the inner extents that keep the
    aspect ratio bounded and fit a glyph. Pairs are ordered by area and a
    size bucket is drawn: very small 3%, small 7%, medium 35%, large 50%,
    very large 5%.

    Args:
        padding: Extra padding inside the drawing margin
        seed: Composition seed

    Returns:
        CellSize in reference pixels
    """
    inner_w, inner_h = inner_extent(padding, reference_width, reference_height, drawing_margin)

    widths = get_divisors(inner_w, cell_min, cell_max) or [FALLBACK_CELL_WIDTH]
    heights = get_divisors(inner_h, cell_min, cell_max) or [FALLBACK_CELL_HEIGHT]

    rng = make_stream(seed, CELL_DIMENSIONS_OFFSET)

    pairs = []
    for w in widths:
        for h in heights:
            ratio = max(w / h, h / w)
            if ratio <= cell_aspect_max and w >= h * MIN_WIDTH_RATIO:
                pairs.append(CellSize(w, h))

    if not pairs:
        return CellSize(FALLBACK_CELL_WIDTH, FALLBACK_CELL_HEIGHT)

    pairs.sort(key=lambda p: p.width * p.height)
    n = len(pairs)

    size_bias = rng()
    if size_bias < 0.03:
        end = max(1, math.ceil(n * 0.1))
        idx = math.floor(rng() * end)
    elif size_bias < 0.1:
        start = math.floor(n * 0.1)
        end = math.floor(n * 0.25)
        idx = start + math.floor(rng() * max(1, end - start))
    elif size_bias < 0.45:
        start = math.floor(n * 0.25)
        end = math.floor(n * 0.75)
        idx = start + math.floor(rng() * (end - start))
    elif size_bias < 0.95:
        start = math.floor(n * 0.75)
        end = math.floor(n * 0.9)
        idx = start + math.floor(rng() * max(1, end - start))
    else:
        start = math.floor(n * 0.9)
        idx = start + math.floor(rng() * (n - start))

    return pairs[min(idx, n - 1)]


def _pick_gap_ratio(rng, force_negative: bool) -> float:
    if force_negative:
        return NEGATIVE_GAP_RATIOS[math.floor(rng() * len(NEGATIVE_GAP_RATIOS))]
    roll = rng()
    for limit, ratio in GAP_RATIO_TABLE:
        if roll < limit:
            return ratio
    return LARGEST_GAP_RATIO


def _fit_axis(cell: float, gap: float, inner: float):
    """Count, gap and cell size along one axis."""
    stride = cell + gap
    count = max(1, math.floor((inner + gap) / stride)) if stride > 0 else 1
    gap = gap if count > 1 else 0
    if count == 1 and cell < inner:
        # A lone column or row spans the whole extent
        cell = inner
        gap = 0
    return count, gap, cell


def calculate_grid_with_gaps(
    seed: int,
    cell_width: float,
    cell_height: float,
    inner_width: float,
    inner_height: float,
) -> GridLayout:
    """
    Lay the cells out with seed-drawn gaps.

    60% of seeds get gaps: columns only, rows only or both with roughly equal
    odds. Each enabled axis is forced into overlap 30% of the time;
    otherwise its ratio comes from a table where no gap is most likely.

    Returns:
        GridLayout in reference pixels
    """
    rng = make_stream(seed, GAP_OFFSET)

    use_col_gaps = False
    use_row_gaps = False
    force_negative_col = False
    force_negative_row = False

    if rng() < 0.6:
        gap_type = rng()
        if gap_type < 0.33:
            use_col_gaps = True
        elif gap_type < 0.66:
            use_row_gaps = True
        else:
            use_col_gaps = True
            use_row_gaps = True

        if use_col_gaps and rng() < 0.3:
            force_negative_col = True
        if use_row_gaps and rng() < 0.3:
            force_negative_row = True

    col_ratio = _pick_gap_ratio(rng, force_negative_col) if use_col_gaps else 0
    cols, col_gap, cell_width = _fit_axis(cell_width, cell_width * col_ratio, inner_width)

    row_ratio = _pick_gap_ratio(rng, force_negative_row) if use_row_gaps else 0
    rows, row_gap, cell_height = _fit_axis(cell_height, cell_height * row_ratio, inner_height)

    grid_width = cols * cell_width + ((cols - 1) * col_gap if cols > 1 else 0)
    grid_height = rows * cell_height + ((rows - 1) * row_gap if rows > 1 else 0)

    width_diff = inner_width - grid_width
    height_diff = inner_height - grid_height

    return GridLayout(
        cols=cols,
        rows=rows,
        cell_width=cell_width,
        cell_height=cell_height,
        col_gap=col_gap,
        row_gap=row_gap,
        stride_x=cell_width + col_gap,
        stride_y=cell_height + row_gap,
        offset_x=width_diff / 2 if width_diff > 0 else 0,
        offset_y=height_diff / 2 if height_diff > 0 else 0,
        grid_width=grid_width,
        grid_height=grid_height,
    )


def gap_ratio_label(ratio: float) -> str:
    """Readable label of a gap ratio."""
    if abs(ratio) < GAP_LABEL_TOLERANCE:
        return "none"
    for value, label in GAP_LABELS:
        if abs(ratio - value) < GAP_LABEL_TOLERANCE:
            return label
    percent = math.floor(ratio * 100 + 0.5)
    if ratio < 0:
        return f"{percent}% overlap"
    return f"{percent}%"


def generate_gap_info(
    seed: int,
    cell_width: float,
    cell_height: float,
    inner_width: float,
    inner_height: float,
    layout: Optional[GridLayout] = None,
) -> GapInfo:
    """Describe the gaps of a layout, computing it when not given."""
    if layout is None:
        layout = calculate_grid_with_gaps(seed, cell_width, cell_height, inner_width, inner_height)

    col_ratio = layout.col_gap / layout.cell_width
    row_ratio = layout.row_gap / layout.cell_height

    return GapInfo(
        col_gap_ratio=col_ratio,
        row_gap_ratio=row_ratio,
        col_gap_category=gap_ratio_label(col_ratio),
        row_gap_category=gap_ratio_label(row_ratio),
        has_gaps=abs(col_ratio) > GAP_LABEL_TOLERANCE or abs(row_ratio) > GAP_LABEL_TOLERANCE,
        has_overlap=col_ratio < -GAP_LABEL_TOLERANCE or row_ratio < -GAP_LABEL_TOLERANCE,
    )
