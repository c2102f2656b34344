"""
Fold simulation.

Generates the crease lines of a composition inside the grid's pixel
extents. Every fold picks an anchor on the sheet boundary or on existing
structure, picks a terminus that makes a long enough line, and then either
registers the line as a crease or lets it vanish depending on the paper.

Crease weights breathe: at the start of every cycle of ``max_folds`` folds
each existing crease is faded by the reduction factor of the cycle slot it
was created in, so old structure recedes instead of piling up.
"""

import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

import numpy as np
import structlog

from ..utils.random import (
    ABSORBENCY_OFFSET,
    CREASE_WEIGHT_OFFSET,
    MAIN_OFFSET,
    REDUCTION_OFFSET,
    RELATIONSHIP_BIAS_OFFSET,
    make_stream,
)
from . import fdlibm
from .fold_strategy import (
    STRAIGHT_STRATEGIES,
    Clustered,
    Diagonal,
    FoldStrategy,
    Grid,
    Horizontal,
    Radial,
    Vertical,
    generate_fold_strategy,
    strategy_jitter,
)
from .geometry import (
    EDGE_BOTTOM,
    EDGE_LEFT,
    EDGE_RIGHT,
    EDGE_TOP,
    Point,
    PointType,
    angle_difference,
    clamp,
    corner_point,
    crease_angle,
    distance,
    edge_point,
    is_vertical_edge,
    lerp,
    midpoint,
    pairwise_segment_intersections,
    point_to_segment_distance,
    segment_intersect_arrays,
    weighted_random_index,
)
from .paper import PaperProperties, WeightRange, generate_max_folds

logger = structlog.get_logger()

ALL_EDGES = [EDGE_TOP, EDGE_RIGHT, EDGE_BOTTOM, EDGE_LEFT]
SIDE_EDGES = [EDGE_RIGHT, EDGE_LEFT]  # anchors for horizontal creases
TOP_BOTTOM_EDGES = [EDGE_TOP, EDGE_BOTTOM]  # anchors for vertical creases

MIN_CREASE_FRACTION = 0.15
MIN_CREASE_WEIGHT = 0.01
WEIGHT_FLOOR = 0.01
INTERSECTION_REFRESH_INTERVAL = 5
FOLD_TARGET_MARGIN = 0.05

PARALLEL_ANGLE = 15
PERPENDICULAR_ANGLE = 75


@dataclass
class Crease:
    """A registered fold line."""

    p1: Point
    p2: Point
    depth: int  # insertion index
    weight: float
    cycle_position: int
    reduction_multiplier: float
    anchor_type: PointType
    terminus_type: PointType
    angle: float = field(init=False)

    def __post_init__(self):
        self.angle = crease_angle(self.p1, self.p2)

    def point_at(self, t: float) -> Point:
        return lerp(self.p1, self.p2, t)

    @property
    def length(self) -> float:
        return distance(self.p1, self.p2)


@dataclass
class Anchor:
    """Start point of a candidate fold."""

    point: Point
    type: PointType
    edge: Optional[int] = None
    corner: Optional[int] = None
    t: Optional[float] = None
    crease_index: Optional[int] = None


@dataclass
class Terminus:
    """End point of a candidate fold, with its selection weight."""

    point: Point
    type: PointType
    edge: Optional[int] = None
    crease_index: Optional[int] = None
    weight: float = 1.0


class KnownIntersection(NamedTuple):
    """Cached crossing of two creases, used as an anchor source."""

    point: Point
    crease1: int
    crease2: int


class RelationshipBias(NamedTuple):
    """Weight boosts for termini aligned with existing creases."""

    parallel: float
    perpendicular: float


@dataclass
class FoldSimulation:
    """Result of a fold simulation."""

    width: float
    height: float
    strategy: FoldStrategy
    max_folds: int
    creases: List[Crease] = field(default_factory=list)
    first_fold_target: Optional[Point] = None
    last_fold_target: Optional[Point] = None

    @property
    def crease_count(self) -> int:
        return len(self.creases)

    def crease_endpoints(self) -> np.ndarray:
        """Creases as an (n, 4) array of x1, y1, x2, y2."""
        if not self.creases:
            return np.zeros((0, 4), dtype=np.float64)
        return np.array(
            [[c.p1.x, c.p1.y, c.p2.x, c.p2.y] for c in self.creases],
            dtype=np.float64,
        )


class FoldSimulator:
    """
    Runs the fold state machine for one seed.

    All randomness comes from per-purpose LCG streams keyed off the seed, so
    the same inputs always give the same creases.
    """

    def __init__(
        self,
        width: float,
        height: float,
        seed: int,
        weight_range: Optional[WeightRange] = None,
        strategy: Optional[FoldStrategy] = None,
        paper: Optional[PaperProperties] = None,
    ):
        """
        Initialize the simulator.

        Args:
            width: Grid width in pixels
            height: Grid height in pixels
            seed: Composition seed
            weight_range: Range for base crease weights, [0, 1] when omitted
            strategy: Strategy override, drawn from the seed when omitted
            paper: Paper override, plain paper when omitted
        """
        self.width = width
        self.height = height
        self.seed = seed
        self.weight_range = weight_range or WeightRange()
        self.strategy = strategy or generate_fold_strategy(seed)
        self.paper = paper or PaperProperties.default()
        self.max_folds = generate_max_folds(seed)

        self.min_crease_length = min(width, height) * MIN_CREASE_FRACTION
        self.target_margin = max(width, height) * FOLD_TARGET_MARGIN

        self._rng = make_stream(seed, MAIN_OFFSET)
        self._weight_rng = make_stream(seed, CREASE_WEIGHT_OFFSET)
        self._absorbency_rng = make_stream(seed, ABSORBENCY_OFFSET)

        # One reduction factor per cycle slot, drawn up front
        reduction_rng = make_stream(seed, REDUCTION_OFFSET)
        self.reduction_multipliers = [
            0.001 + reduction_rng() * 0.25 for _ in range(self.max_folds)
        ]

        bias_rng = make_stream(seed, RELATIONSHIP_BIAS_OFFSET)
        parallel = bias_rng() * 0.8
        perpendicular = bias_rng() * 0.8
        self.relationship_bias = RelationshipBias(parallel, perpendicular)

        self.creases: List[Crease] = []
        self.known_intersections: List[KnownIntersection] = []
        self._crease_angles: List[float] = []

    # ------------------------------------------------------------------ run

    def run(self, num_folds: int) -> FoldSimulation:
        """
        Simulate ``num_folds`` folds.

        Returns:
            FoldSimulation with the registered creases and fold targets
        """
        result = FoldSimulation(
            width=self.width,
            height=self.height,
            strategy=self.strategy,
            max_folds=self.max_folds,
        )
        if not num_folds or num_folds <= 0:
            return result

        for f in range(num_folds):
            cycle_position = f % self.max_folds
            if cycle_position == 0 and f >= self.max_folds:
                self._breathe()

            if f % INTERSECTION_REFRESH_INTERVAL == 0 and len(self.creases) > 1:
                self.known_intersections = self._find_crease_intersections()

            anchor = self.pick_anchor(f)
            terminus = self.pick_terminus(anchor, f)

            crease = self._register(anchor, terminus, cycle_position)
            if crease is None:
                continue

            target = self._fold_target(crease)
            if result.first_fold_target is None:
                result.first_fold_target = target
            result.last_fold_target = target

        result.creases = self.creases
        logger.debug(
            "Fold simulation complete",
            seed=self.seed,
            folds=num_folds,
            creases=len(self.creases),
            strategy=self.strategy.type.value,
        )
        return result

    def _breathe(self) -> None:
        """Fade every existing crease at a cycle boundary."""
        for crease in self.creases:
            crease.weight = max(WEIGHT_FLOOR, crease.weight * crease.reduction_multiplier)

    def _register(
        self, anchor: Anchor, terminus: Terminus, cycle_position: int
    ) -> Optional[Crease]:
        """Decide whether the candidate line becomes a crease."""
        p1 = anchor.point
        p2 = terminus.point

        # Both streams advance on every fold, registered or not
        registers = self._absorbency_rng() < self.paper.absorbency
        weight = self.weight_range.sample(self._weight_rng())

        if self.paper.angle_affinity is not None and self.paper.affinity_strength > 0:
            angle_diff = angle_difference(crease_angle(p1, p2), self.paper.angle_affinity)
            weight *= 1.0 - (angle_diff / 90) * self.paper.affinity_strength

        if not registers or weight <= MIN_CREASE_WEIGHT:
            return None

        crease = Crease(
            p1=Point(p1.x, p1.y),
            p2=Point(p2.x, p2.y),
            depth=len(self.creases),
            weight=weight,
            cycle_position=cycle_position,
            reduction_multiplier=self.reduction_multipliers[cycle_position],
            anchor_type=anchor.type,
            terminus_type=terminus.type,
        )
        self._add_crease(crease)
        return crease

    def _add_crease(self, crease: Crease) -> None:
        """Append a crease and cache its crossings with earlier creases."""
        previous = self.creases
        if previous:
            b = np.array([[c.p1.x, c.p1.y, c.p2.x, c.p2.y] for c in previous])
            hit, xs, ys = segment_intersect_arrays(
                crease.p1.x, crease.p1.y, crease.p2.x, crease.p2.y,
                b[:, 0], b[:, 1], b[:, 2], b[:, 3],
            )
            new_index = len(previous)
            for i in np.flatnonzero(hit):
                self.known_intersections.append(
                    KnownIntersection(Point(float(xs[i]), float(ys[i])), int(i), new_index)
                )
        self.creases.append(crease)
        self._crease_angles.append(crease.angle)

    def _find_crease_intersections(self) -> List[KnownIntersection]:
        """Recompute every crease-crease crossing."""
        p1 = np.array([[c.p1.x, c.p1.y] for c in self.creases])
        p2 = np.array([[c.p2.x, c.p2.y] for c in self.creases])
        ii, jj, xs, ys = pairwise_segment_intersections(p1, p2)
        return [
            KnownIntersection(Point(float(x), float(y)), int(i), int(j))
            for i, j, x, y in zip(ii, jj, xs, ys)
        ]

    def _fold_target(self, crease: Crease) -> Point:
        """Crease midpoint pulled inside the target margin."""
        mid = midpoint(crease.p1, crease.p2)
        m = self.target_margin
        return Point(
            clamp(mid.x, m, self.width - m),
            clamp(mid.y, m, self.height - m),
        )

    # --------------------------------------------------------------- anchors

    def _strategy_edges(self, fold_index: int) -> List[int]:
        """Edges a boundary anchor may sit on."""
        if isinstance(self.strategy, Horizontal):
            return SIDE_EDGES
        if isinstance(self.strategy, Grid):
            return SIDE_EDGES if fold_index % 2 == 0 else TOP_BOTTOM_EDGES
        if isinstance(self.strategy, Vertical):
            return TOP_BOTTOM_EDGES
        return ALL_EDGES

    def pick_anchor(self, fold_index: int) -> Anchor:
        """
        Pick the start point of a fold.

        Early folds start on the sheet boundary; later ones increasingly start
        on existing creases or their crossings. Radial and clustered
        strategies pull boundary anchors towards their focus.
        """
        rng = self._rng
        w, h = self.width, self.height
        strategy = self.strategy
        edges = self._strategy_edges(fold_index)

        if isinstance(strategy, Radial):
            if fold_index < 10 or not self.creases or rng() < 0.6:
                return self._radial_anchor(strategy)

        if isinstance(strategy, Clustered):
            if fold_index < 15 or rng() < 0.7:
                return self._clustered_anchor(strategy)

        edge_probability = max(0.2, 1.0 - fold_index * 0.015)
        force_edge = isinstance(strategy, STRAIGHT_STRATEGIES)

        use_edge = (
            force_edge
            or rng() < edge_probability
            or (not self.creases and not self.known_intersections)
        )

        if use_edge:
            if force_edge:
                corner_chance = 0
            elif isinstance(strategy, Diagonal):
                corner_chance = 0.5
            else:
                corner_chance = 0.15

            if rng() < corner_chance:
                corner = math.floor(rng() * 4)
                return Anchor(corner_point(corner, w, h), PointType.CORNER, corner=corner)

            edge = edges[math.floor(rng() * len(edges))]
            jitter = strategy_jitter(strategy)
            jitter = jitter / 100 if jitter else 0
            base_t = 0.05 + rng() * 0.9
            t = clamp(base_t + (rng() - 0.5) * jitter, 0.05, 0.95)
            return Anchor(edge_point(edge, t, w, h), PointType.EDGE, edge=edge, t=t)

        use_intersection = bool(self.known_intersections) and rng() < 0.35
        if use_intersection:
            inter = self.known_intersections[
                math.floor(rng() * len(self.known_intersections))
            ]
            return Anchor(Point(inter.point.x, inter.point.y), PointType.INTERSECTION)

        if self.creases:
            index = math.floor(rng() * len(self.creases))
            # Stay in the middle 80% of the crease
            t = 0.1 + rng() * 0.8
            return Anchor(
                self.creases[index].point_at(t),
                PointType.CREASE,
                crease_index=index,
                t=t,
            )

        edge = edges[math.floor(rng() * len(edges))]
        t = 0.05 + rng() * 0.9
        return Anchor(edge_point(edge, t, w, h), PointType.EDGE, edge=edge, t=t)

    def _radial_anchor(self, strategy: Radial) -> Anchor:
        rng = self._rng
        w, h = self.width, self.height
        focal_x = strategy.focal_x * w
        focal_y = strategy.focal_y * h

        edge_distances = sorted(
            [
                (EDGE_TOP, focal_y),
                (EDGE_RIGHT, w - focal_x),
                (EDGE_BOTTOM, h - focal_y),
                (EDGE_LEFT, focal_x),
            ],
            key=lambda e: e[1],
        )

        roll = rng()
        if roll < 0.5:
            edge = edge_distances[0][0]
        elif roll < 0.8:
            edge = edge_distances[1][0]
        else:
            edge = edge_distances[math.floor(rng() * 4)][0]

        # Position along the edge follows the focal point's projection
        if edge == EDGE_TOP or edge == EDGE_BOTTOM:
            t = 0.1 + focal_x / w * 0.8 + (rng() - 0.5) * 0.3
        else:
            t = 0.1 + focal_y / h * 0.8 + (rng() - 0.5) * 0.3
        t = clamp(t, 0.05, 0.95)

        return Anchor(edge_point(edge, t, w, h), PointType.EDGE, edge=edge, t=t)

    def _clustered_anchor(self, strategy: Clustered) -> Anchor:
        rng = self._rng
        w, h = self.width, self.height
        cluster_x = strategy.cluster_x * w
        cluster_y = strategy.cluster_y * h

        edge_weights = [
            (EDGE_TOP, 1 + (1 - abs(cluster_y / h)) * 2),
            (EDGE_RIGHT, 1 + cluster_x / w * 2),
            (EDGE_BOTTOM, 1 + cluster_y / h * 2),
            (EDGE_LEFT, 1 + (1 - cluster_x / w) * 2),
        ]
        total = 0
        for _, weight in edge_weights:
            total += weight

        roll = rng() * total
        edge = EDGE_TOP
        for candidate, weight in edge_weights:
            roll -= weight
            if roll <= 0:
                edge = candidate
                break

        if edge == EDGE_TOP or edge == EDGE_BOTTOM:
            t = cluster_x / w + (rng() - 0.5) * strategy.spread
        else:
            t = cluster_y / h + (rng() - 0.5) * strategy.spread
        t = clamp(t, 0.05, 0.95)

        return Anchor(edge_point(edge, t, w, h), PointType.EDGE, edge=edge, t=t)

    # --------------------------------------------------------------- termini

    def pick_terminus(self, anchor: Anchor, fold_index: int) -> Terminus:
        """
        Pick the end point of a fold.

        Straight, diagonal and radial strategies compute an exact end point
        when the anchor allows it; everything else is a weighted pick among
        candidates that respect the minimum crease length.
        """
        strategy = self.strategy

        if isinstance(strategy, STRAIGHT_STRATEGIES):
            terminus = self._straight_terminus(anchor, fold_index)
            if terminus is not None:
                return terminus

        if isinstance(strategy, Diagonal):
            terminus = self._diagonal_terminus(anchor, strategy)
            if terminus is not None:
                return terminus

        if isinstance(strategy, Radial):
            terminus = self._radial_terminus(anchor, strategy)
            if terminus is not None:
                return terminus

        if isinstance(strategy, Clustered):
            terminus = self._clustered_terminus(anchor, strategy)
            if terminus is not None:
                return terminus

        return self._default_terminus(anchor, fold_index)

    def _straight_terminus(self, anchor: Anchor, fold_index: int) -> Optional[Terminus]:
        """Opposite edge, keeping the line nearly straight."""
        if anchor.type != PointType.EDGE:
            return None

        strategy = self.strategy
        want_horizontal = isinstance(strategy, Horizontal) or (
            isinstance(strategy, Grid) and fold_index % 2 == 0
        )
        # An anchor on the left or right edge makes a horizontal crease
        creates_horizontal = is_vertical_edge(anchor.edge)
        if want_horizontal != creates_horizontal:
            return None

        opposite = (anchor.edge + 2) % 4
        jitter = strategy.jitter / 100 if strategy.jitter else 0
        base_t = anchor.t if anchor.t is not None else 0.5
        t = clamp(base_t + (self._rng() - 0.5) * jitter, 0.05, 0.95)
        # Opposite edges run in opposite directions
        t = 1 - t

        return Terminus(
            edge_point(opposite, t, self.width, self.height),
            PointType.EDGE,
            edge=opposite,
        )

    def _diagonal_terminus(self, anchor: Anchor, strategy: Diagonal) -> Optional[Terminus]:
        """Opposite corner, or the boundary hit of a ray at the target angle."""
        rng = self._rng
        w, h = self.width, self.height
        target_angle = strategy.angle or (45 if rng() < 0.5 else 135)

        if anchor.type == PointType.CORNER:
            return Terminus(corner_point((anchor.corner + 2) % 4, w, h), PointType.CORNER)

        if anchor.type != PointType.EDGE:
            return None

        jitter = (rng() - 0.5) * strategy.jitter if strategy.jitter else 0
        angle = (target_angle + jitter) * math.pi / 180

        ax, ay = anchor.point
        dx = fdlibm.cos(angle)
        dy = fdlibm.sin(angle)

        best_point = None
        best_dist = 0

        # Order matters for ties: top, bottom, left, right
        for edge_y in (0, h):
            if dy == 0:
                continue
            t = (edge_y - ay) / dy
            if t > 0:
                x = ax + dx * t
                if 0 <= x <= w:
                    point = Point(x, edge_y)
                    dist = distance(anchor.point, point)
                    if dist > best_dist and dist >= self.min_crease_length:
                        best_dist = dist
                        best_point = point
        for edge_x in (0, w):
            if dx == 0:
                continue
            t = (edge_x - ax) / dx
            if t > 0:
                y = ay + dy * t
                if 0 <= y <= h:
                    point = Point(edge_x, y)
                    dist = distance(anchor.point, point)
                    if dist > best_dist and dist >= self.min_crease_length:
                        best_dist = dist
                        best_point = point

        if best_point is None:
            return None
        return Terminus(best_point, PointType.EDGE)

    def _radial_terminus(self, anchor: Anchor, strategy: Radial) -> Optional[Terminus]:
        """Extend the ray from the focal point through the anchor."""
        w, h = self.width, self.height
        focal_x = strategy.focal_x * w
        focal_y = strategy.focal_y * h

        ax, ay = anchor.point
        dx = ax - focal_x
        dy = ay - focal_y
        length = math.sqrt(dx * dx + dy * dy)
        if length <= 0:
            return None

        ndx = dx / length
        ndy = dy / length

        max_t = math.inf
        if ndx > 0:
            max_t = min(max_t, (w - ax) / ndx)
        if ndx < 0:
            max_t = min(max_t, -ax / ndx)
        if ndy > 0:
            max_t = min(max_t, (h - ay) / ndy)
        if ndy < 0:
            max_t = min(max_t, -ay / ndy)

        terminus = Point(
            clamp(ax + ndx * max_t * 0.95, 0, w),
            clamp(ay + ndy * max_t * 0.95, 0, h),
        )
        if distance(anchor.point, terminus) >= self.min_crease_length:
            return Terminus(terminus, PointType.EDGE)
        return None

    def _clustered_terminus(self, anchor: Anchor, strategy: Clustered) -> Optional[Terminus]:
        """Edge points weighted by how close the line passes to the cluster."""
        rng = self._rng
        w, h = self.width, self.height
        cluster = Point(strategy.cluster_x * w, strategy.cluster_y * h)
        max_dist = max(w, h) * 0.5

        candidates = []
        for edge in ALL_EDGES:
            for _ in range(3):
                t = 0.1 + rng() * 0.8
                point = edge_point(edge, t, w, h)
                line_dist = point_to_segment_distance(cluster, anchor.point, point)
                proximity = max(0.1, 1 - line_dist / max_dist) * 3
                candidates.append(Terminus(point, PointType.EDGE, edge=edge, weight=proximity))

        valid = [
            c for c in candidates
            if distance(anchor.point, c.point) >= self.min_crease_length
        ]
        if not valid:
            return None
        return valid[weighted_random_index([c.weight for c in valid], rng)]

    def _default_terminus(self, anchor: Anchor, fold_index: int) -> Terminus:
        rng = self._rng
        w, h = self.width, self.height
        candidates: List[Terminus] = []

        if anchor.type == PointType.EDGE:
            opposite = (anchor.edge + 2) % 4
            adjacent1 = (anchor.edge + 1) % 4
            adjacent2 = (anchor.edge + 3) % 4

            # Opposite edge carries the primary folds
            opposite_weight = 3.0 if fold_index < 3 else 1.5
            for _ in range(3):
                t = 0.1 + rng() * 0.8
                candidates.append(
                    Terminus(edge_point(opposite, t, w, h), PointType.EDGE,
                             edge=opposite, weight=opposite_weight)
                )
            for _ in range(2):
                t = 0.1 + rng() * 0.8
                candidates.append(
                    Terminus(edge_point(adjacent1, t, w, h), PointType.EDGE,
                             edge=adjacent1, weight=1.0)
                )
                candidates.append(
                    Terminus(edge_point(adjacent2, t, w, h), PointType.EDGE,
                             edge=adjacent2, weight=1.0)
                )
        elif anchor.type == PointType.CORNER:
            candidates.append(
                Terminus(corner_point((anchor.corner + 2) % 4, w, h), PointType.CORNER, weight=2.0)
            )
            for edge in ALL_EDGES:
                touches_corner = edge == anchor.corner or edge == (anchor.corner + 3) % 4
                if not touches_corner:
                    t = 0.2 + rng() * 0.6
                    candidates.append(
                        Terminus(edge_point(edge, t, w, h), PointType.EDGE, edge=edge, weight=1.5)
                    )
        else:
            for edge in ALL_EDGES:
                t = 0.1 + rng() * 0.8
                candidates.append(
                    Terminus(edge_point(edge, t, w, h), PointType.EDGE, edge=edge, weight=1.0)
                )

            # Subdivide: end on another crease
            if len(self.creases) > 1 and fold_index > 3:
                for _ in range(min(3, len(self.creases))):
                    index = math.floor(rng() * len(self.creases))
                    if anchor.type == PointType.CREASE and anchor.crease_index == index:
                        continue
                    t = 0.15 + rng() * 0.7
                    candidates.append(
                        Terminus(self.creases[index].point_at(t), PointType.CREASE,
                                 crease_index=index, weight=0.6)
                    )

        if self.creases:
            self._apply_relationship_bias(anchor, candidates)

        valid = [
            c for c in candidates
            if distance(anchor.point, c.point) >= self.min_crease_length
        ]

        if not valid:
            return self._fallback_terminus(anchor)

        return valid[weighted_random_index([c.weight for c in valid], rng)]

    def _apply_relationship_bias(self, anchor: Anchor, candidates: List[Terminus]) -> None:
        """Boost candidates parallel or perpendicular to existing creases."""
        parallel, perpendicular = self.relationship_bias
        existing = np.asarray(self._crease_angles, dtype=np.float64)

        for cand in candidates:
            proposed = crease_angle(anchor.point, cand.point)
            diffs = np.abs(proposed - existing)
            diffs = np.where(diffs > 90, 180 - diffs, diffs)

            is_parallel = (diffs < PARALLEL_ANGLE) if parallel > 0 else np.zeros(len(diffs), bool)
            is_perpendicular = (
                (diffs > PERPENDICULAR_ANGLE) if perpendicular > 0 else np.zeros(len(diffs), bool)
            )

            # Multiply in crease order so rounding matches a sequential scan
            for k in np.flatnonzero(is_parallel | is_perpendicular):
                if is_parallel[k]:
                    cand.weight *= 1 + parallel
                else:
                    cand.weight *= 1 + perpendicular

    def _fallback_terminus(self, anchor: Anchor) -> Terminus:
        """Edge midpoint far enough away, else the opposite edge's midpoint."""
        w, h = self.width, self.height
        for edge in ALL_EDGES:
            point = edge_point(edge, 0.5, w, h)
            if distance(anchor.point, point) >= self.min_crease_length:
                return Terminus(point, PointType.EDGE, edge=edge)

        edge = (anchor.edge + 2) % 4 if anchor.type == PointType.EDGE else EDGE_TOP
        return Terminus(edge_point(edge, 0.5, w, h), PointType.EDGE, edge=edge)


def simulate_folds(
    width: float,
    height: float,
    num_folds: int,
    seed: int,
    weight_range: Optional[WeightRange] = None,
    strategy: Optional[FoldStrategy] = None,
    paper: Optional[PaperProperties] = None,
) -> FoldSimulation:
    """
    Simulate folding a ``width`` x ``height`` sheet ``num_folds`` times.

    A sheet without area yields an empty simulation without touching any
    random stream.

    Returns:
        FoldSimulation
    """
    if not width or not height or width <= 0 or height <= 0:
        return FoldSimulation(
            width=width or 0,
            height=height or 0,
            strategy=strategy or generate_fold_strategy(seed),
            max_folds=0,
        )

    simulator = FoldSimulator(width, height, seed, weight_range, strategy, paper)
    return simulator.run(num_folds)
