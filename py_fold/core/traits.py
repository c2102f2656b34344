"""
Rendering traits and metadata models.

Traits are seed-derived switches a renderer reads (render mode, draw
direction, margin size, rare overlays). Each one has its own stream so
that adding a trait never disturbs the others.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from pydantic import BaseModel, Field

from ..config import DRAWING_MARGIN
from ..utils.random import (
    CELL_OVERFLOW_OFFSET,
    DRAW_DIRECTION_OFFSET,
    MARGIN_SIZE_OFFSET,
    OVERLAP_OFFSET,
    RARE_ANALYTICS_OFFSET,
    RARE_CELL_OUTLINES_OFFSET,
    RARE_CREASE_LINES_OFFSET,
    RARE_HIT_COUNTS_OFFSET,
    RENDER_MODE_OFFSET,
    SHOW_EMPTY_CELLS_OFFSET,
    make_stream,
)

RARE_TRAIT_PROBABILITY = 0.008


class RenderMode(str, Enum):
    NORMAL = "normal"
    INVERTED = "inverted"
    BINARY = "binary"
    SPARSE = "sparse"
    DENSE = "dense"


class DrawDirection(str, Enum):
    """Direction glyphs grow in when they overflow their cell."""

    LTR = "ltr"
    RTL = "rtl"
    CENTER = "center"
    ALTERNATE = "alternate"
    DIAGONAL = "diagonal"
    RANDOM_MID = "randomMid"
    CHECKERBOARD = "checkerboard"


@dataclass(frozen=True)
class MarginSize:
    multiplier: float
    name: str

    @property
    def value(self) -> int:
        """Margin in reference pixels, rounded half up."""
        return math.floor(DRAWING_MARGIN * self.multiplier + 0.5)


MARGIN_FULL = MarginSize(1.0, "Full")
MARGIN_HALF = MarginSize(0.5, "Half")
MARGIN_QUARTER = MarginSize(0.25, "Quarter")
MARGIN_BLEED = MarginSize(0, "Bleed")


@dataclass(frozen=True)
class OverlapInfo:
    has_overlap: bool
    amount: str


def generate_render_mode(seed: int) -> RenderMode:
    """normal 40%, inverted 30%, binary, sparse and dense 10% each."""
    roll = make_stream(seed, RENDER_MODE_OFFSET)()
    if roll < 0.4:
        return RenderMode.NORMAL
    if roll < 0.7:
        return RenderMode.INVERTED
    if roll < 0.8:
        return RenderMode.BINARY
    if roll < 0.9:
        return RenderMode.SPARSE
    return RenderMode.DENSE


def generate_show_empty_cells(seed: int) -> bool:
    return make_stream(seed, SHOW_EMPTY_CELLS_OFFSET)() < 0.3


def _rare(seed: int, offset: int) -> bool:
    return make_stream(seed, offset)() < RARE_TRAIT_PROBABILITY


def generate_rare_cell_outlines(seed: int) -> bool:
    return _rare(seed, RARE_CELL_OUTLINES_OFFSET)


def generate_rare_hit_counts(seed: int) -> bool:
    return _rare(seed, RARE_HIT_COUNTS_OFFSET)


def generate_rare_crease_lines(seed: int) -> bool:
    return _rare(seed, RARE_CREASE_LINES_OFFSET)


def generate_rare_analytics_mode(seed: int) -> bool:
    return _rare(seed, RARE_ANALYTICS_OFFSET)


def generate_draw_direction(seed: int) -> DrawDirection:
    roll = make_stream(seed, DRAW_DIRECTION_OFFSET)()
    if roll < 0.22:
        return DrawDirection.LTR
    if roll < 0.44:
        return DrawDirection.RTL
    if roll < 0.65:
        return DrawDirection.CENTER
    if roll < 0.8:
        return DrawDirection.ALTERNATE
    if roll < 0.9:
        return DrawDirection.DIAGONAL
    if roll < 0.96:
        return DrawDirection.RANDOM_MID
    return DrawDirection.CHECKERBOARD


def generate_margin_size(seed: int) -> MarginSize:
    """Full 50%, half 25%, quarter 20%, bleed 5%."""
    roll = make_stream(seed, MARGIN_SIZE_OFFSET)() * 100
    if roll < 50:
        return MARGIN_FULL
    if roll < 75:
        return MARGIN_HALF
    if roll < 95:
        return MARGIN_QUARTER
    return MARGIN_BLEED


def generate_overlap_info(seed: int) -> OverlapInfo:
    rng = make_stream(seed, OVERLAP_OFFSET)
    if rng() < 0.5:
        return OverlapInfo(has_overlap=False, amount="none")

    roll = rng()
    if roll < 0.2:
        amount = "5%"
    elif roll < 0.4:
        amount = "25%"
    elif roll < 0.6:
        amount = "50%"
    elif roll < 0.8:
        amount = "75%"
    else:
        amount = "95%"
    return OverlapInfo(has_overlap=True, amount=amount)


def generate_cell_overflow(seed: int) -> int:
    """How many neighbouring cells a glyph may spill into."""
    roll = make_stream(seed, CELL_OVERFLOW_OFFSET)()
    if roll < 0.6:
        return 0
    if roll < 0.8:
        return 1
    if roll < 0.9:
        return 2
    if roll < 0.97:
        return 3
    return 5


class TraitAttribute(BaseModel):
    """A single metadata attribute."""

    trait_type: str
    value: Union[int, str]


class FoldMetadata(BaseModel):
    """Token metadata for a composition."""

    name: str
    description: str = Field(default="On-chain generative paper folding art")
    image: str = Field(default="", description="Image URL, empty when no base URL is set")
    attributes: List[TraitAttribute] = Field(default_factory=list)

    def attribute(self, trait_type: str):
        """Value of an attribute, None when absent."""
        for attr in self.attributes:
            if attr.trait_type == trait_type:
                return attr.value
        return None
