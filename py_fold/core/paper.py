"""
Paper model.

Paper properties break the 1:1 relationship between fold count and visual
density: resistant paper drops most candidate creases, grained paper
weakens creases that run against its preferred angle, and the ceiling
multiplier decides how early the sheet saturates.
"""

import math
from dataclasses import dataclass
from typing import Optional

from ..utils.random import (
    MAX_FOLDS_OFFSET,
    PAPER_OFFSET,
    WEIGHT_RANGE_OFFSET,
    make_stream,
)


@dataclass(frozen=True)
class PaperProperties:
    """How folds register on the sheet."""

    absorbency: float  # probability a candidate crease registers
    intersection_threshold: float = 0.0
    angle_affinity: Optional[float] = None  # preferred crease angle in degrees
    affinity_strength: float = 0.0
    ceiling_multiplier: float = 1.0

    @classmethod
    def default(cls) -> "PaperProperties":
        """Plain paper: every fold registers, no grain, base ceiling."""
        return cls(absorbency=1.0)

    @property
    def has_grain(self) -> bool:
        return self.angle_affinity is not None


@dataclass(frozen=True)
class WeightRange:
    """Range base crease weights are drawn from."""

    min: float = 0.0
    max: float = 1.0

    def sample(self, roll: float) -> float:
        return self.min + roll * (self.max - self.min)


def generate_paper_properties(seed: int) -> PaperProperties:
    """
    Draw the paper for a seed.

    Absorbency is uniform in [0.1, 0.9]; 40% of sheets have a grain angle in
    [0, 180) with strength in [0.2, 0.8]; the ceiling multiplier is in
    [0.3, 1.7]. The intersection threshold is disabled and always 0.
    """
    rng = make_stream(seed, PAPER_OFFSET)

    absorbency = 0.1 + rng() * 0.8

    has_angle_affinity = rng() < 0.4
    angle_affinity = rng() * 180 if has_angle_affinity else None
    affinity_strength = 0.2 + rng() * 0.6 if has_angle_affinity else 0.0

    ceiling_multiplier = 0.3 + rng() * 1.4

    return PaperProperties(
        absorbency=absorbency,
        intersection_threshold=0.0,
        angle_affinity=angle_affinity,
        affinity_strength=affinity_strength,
        ceiling_multiplier=ceiling_multiplier,
    )


def get_paper_description(props: PaperProperties) -> str:
    """Trait label such as ``Absorbent/Fine/Grain``."""
    if props.absorbency < 0.35:
        abs_desc = "Resistant"
    elif props.absorbency < 0.65:
        abs_desc = "Standard"
    else:
        abs_desc = "Absorbent"

    if props.intersection_threshold < 0.15:
        thresh_desc = "Fine"
    elif props.intersection_threshold < 0.35:
        thresh_desc = "Medium"
    else:
        thresh_desc = "Coarse"

    affinity_desc = "Grain" if props.has_grain else "Uniform"

    return f"{abs_desc}/{thresh_desc}/{affinity_desc}"


def generate_weight_range(seed: int) -> WeightRange:
    """
    Draw the crease weight range for a seed.

    Four styles with equal odds: narrow-light, narrow-heavy, wide, and
    medium.
    """
    rng = make_stream(seed, WEIGHT_RANGE_OFFSET)
    style = rng()

    if style < 0.25:
        base = 0.2 + rng() * 0.2
        return WeightRange(min=base, max=base + 0.1 + rng() * 0.2)
    if style < 0.5:
        base = 0.6 + rng() * 0.2
        return WeightRange(min=base, max=base + 0.1 + rng() * 0.1)
    if style < 0.75:
        low = 0.1 + rng() * 0.2
        return WeightRange(min=low, max=0.7 + rng() * 0.3)
    low = 0.3 + rng() * 0.2
    return WeightRange(min=low, max=0.5 + rng() * 0.5)


def generate_max_folds(seed: int) -> int:
    """Length of the breathing cycle, in [4, 70)."""
    rng = make_stream(seed, MAX_FOLDS_OFFSET)
    return math.floor(4 + rng() * 66)
