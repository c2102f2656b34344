"""
Fold strategies.

A strategy is the geometric family a composition's creases belong to. It
is drawn once per seed and then constrains where folds start and end.
Each variant is its own frozen dataclass carrying only its parameters.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..utils.random import FOLD_STRATEGY_OFFSET, make_stream


class FoldStrategyType(str, Enum):
    """Names of the strategy variants."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"
    RADIAL = "radial"
    GRID = "grid"
    CLUSTERED = "clustered"
    RANDOM = "random"


@dataclass(frozen=True)
class Horizontal:
    """Straight left-to-right creases."""

    jitter: float
    type = FoldStrategyType.HORIZONTAL


@dataclass(frozen=True)
class Vertical:
    """Straight top-to-bottom creases."""

    jitter: float
    type = FoldStrategyType.VERTICAL


@dataclass(frozen=True)
class Diagonal:
    """Creases at 45 or 135 degrees, plus jitter in degrees."""

    angle: float
    jitter: float
    type = FoldStrategyType.DIAGONAL


@dataclass(frozen=True)
class Radial:
    """Creases radiating from a focal point given as canvas fractions."""

    focal_x: float
    focal_y: float
    type = FoldStrategyType.RADIAL


@dataclass(frozen=True)
class Grid:
    """Alternating horizontal (even folds) and vertical (odd folds) creases."""

    jitter: float
    type = FoldStrategyType.GRID


@dataclass(frozen=True)
class Clustered:
    """Creases drawn towards a cluster point given as canvas fractions."""

    cluster_x: float
    cluster_y: float
    spread: float
    type = FoldStrategyType.CLUSTERED


@dataclass(frozen=True)
class Random:
    """No geometric constraint."""

    type = FoldStrategyType.RANDOM


FoldStrategy = Union[Horizontal, Vertical, Diagonal, Radial, Grid, Clustered, Random]

STRAIGHT_STRATEGIES = (Horizontal, Vertical, Grid)


def strategy_jitter(strategy: FoldStrategy) -> float:
    """Jitter parameter of a strategy, 0 for variants without one."""
    if isinstance(strategy, (Horizontal, Vertical, Grid, Diagonal)):
        return strategy.jitter
    return 0.0


def generate_fold_strategy(seed: int) -> FoldStrategy:
    """
    Draw the fold strategy for a seed.

    Distribution: horizontal 16%, vertical 16%, diagonal 12%, radial 12%,
    grid 12%, clustered 12%, random 20%.
    """
    rng = make_stream(seed, FOLD_STRATEGY_OFFSET)
    roll = rng()

    if roll < 0.16:
        return Horizontal(jitter=3 + rng() * 12)
    if roll < 0.32:
        return Vertical(jitter=3 + rng() * 12)
    if roll < 0.44:
        angle = 45 if rng() < 0.5 else 135
        return Diagonal(angle=angle, jitter=5 + rng() * 15)
    if roll < 0.56:
        focal_x = 0.2 + rng() * 0.6
        focal_y = 0.2 + rng() * 0.6
        return Radial(focal_x=focal_x, focal_y=focal_y)
    if roll < 0.68:
        return Grid(jitter=3 + rng() * 10)
    if roll < 0.8:
        cluster_x = 0.15 + rng() * 0.7
        cluster_y = 0.15 + rng() * 0.7
        spread = 0.2 + rng() * 0.4
        return Clustered(cluster_x=cluster_x, cluster_y=cluster_y, spread=spread)
    return Random()
