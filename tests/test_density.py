"""Tests for intersection detection and density aggregation."""

import numpy as np
import pytest

from py_fold.core.density import (
    Thresholds,
    calculate_adaptive_thresholds,
    count_to_level,
    find_intersections,
    fold_target_cell,
    process_creases,
)
from py_fold.core.fold_simulator import Crease, simulate_folds
from py_fold.core.geometry import Point, PointType, segment_intersect, segment_intersect_arrays
from py_fold.core.paper import PaperProperties


def make_crease(x1, y1, x2, y2, depth, weight=0.5):
    return Crease(
        p1=Point(x1, y1),
        p2=Point(x2, y2),
        depth=depth,
        weight=weight,
        cycle_position=depth,
        reduction_multiplier=0.1,
        anchor_type=PointType.EDGE,
        terminus_type=PointType.EDGE,
    )


class TestIntersections:
    """Test pairwise crossing detection."""

    @pytest.fixture
    def cross(self):
        return [
            make_crease(0, 0, 100, 100, 0, weight=0.3),
            make_crease(0, 100, 100, 0, 1, weight=0.4),
        ]

    def test_crossing(self, cross):
        hits = find_intersections(cross)
        assert len(hits) == 1
        hit = hits[0]
        assert hit.point == Point(50.0, 50.0)
        assert (hit.crease1, hit.crease2) == (0, 1)
        assert hit.gap == 1
        assert hit.weight == pytest.approx(0.7)

    @pytest.mark.filterwarnings("error")
    def test_parallel_segments_never_cross(self):
        creases = [make_crease(0, 0, 100, 0, 0), make_crease(0, 10, 100, 10, 1)]
        assert find_intersections(creases) == []

    @pytest.mark.filterwarnings("error")
    def test_parallel_pairs_raise_no_warnings(self):
        # Collinear overlap gives 0/0, offset parallels give x/0
        creases = [
            make_crease(0, 0, 100, 0, 0),
            make_crease(50, 0, 150, 0, 1),
            make_crease(0, 10, 100, 10, 2),
            make_crease(20, 0, 20, 50, 3),
        ]
        hits = find_intersections(creases)
        assert [(h.crease1, h.crease2) for h in hits] == [(2, 3)]

        a = np.array([0.0, 0.0, 10.0])
        hit, xs, ys = segment_intersect_arrays(a, a, a + 100, a, a, a + 5, a + 100, a + 5)
        assert not hit.any()
        assert xs.shape == ys.shape == (3,)

    def test_touching_endpoints_ignored(self):
        # Second segment ends exactly on the first
        creases = [make_crease(0, 50, 100, 50, 0), make_crease(50, 0, 50, 50, 1)]
        assert find_intersections(creases) == []

    def test_matches_scalar_intersection(self):
        sim = simulate_folds(910, 1407, 80, 42)
        creases = sim.creases
        hits = find_intersections(creases)
        expected = []
        for i in range(len(creases)):
            for j in range(i + 1, len(creases)):
                hit = segment_intersect(creases[i].p1, creases[i].p2, creases[j].p1, creases[j].p2)
                if hit:
                    expected.append((i, j, hit.point))
        assert [(h.crease1, h.crease2, h.point) for h in hits] == expected


class TestThresholds:
    """Test adaptive level thresholds."""

    def test_empty(self):
        assert calculate_adaptive_thresholds({}) == Thresholds(1, 2, 3, 999)
        assert calculate_adaptive_thresholds({(0, 0): 0}) == Thresholds(1, 2, 3, 999)

    def test_strictly_increasing(self):
        rng = np.random.default_rng(0)
        for _ in range(20):
            n = int(rng.integers(1, 60))
            weights = {(i, 0): float(w) for i, w in enumerate(rng.random(n) * 3)}
            t = calculate_adaptive_thresholds(weights)
            assert t.t1 >= 0.01
            assert t.t1 < t.t2 < t.t3 < t.t_extreme

    def test_single_weight(self):
        t = calculate_adaptive_thresholds({(0, 0): 0.7})
        assert t.t1 == 0.7
        assert t.t2 == pytest.approx(0.71)

    def test_floors_use_raw_percentiles(self):
        t = calculate_adaptive_thresholds({(0, 0): 0.005})
        assert t.t1 == 0.01
        assert t.t2 == pytest.approx(0.015)
        assert t.t3 == pytest.approx(1.005)
        assert t.t_extreme == pytest.approx(1.015)

    def test_levels(self):
        t = Thresholds(1.0, 2.0, 3.0, 999.0)
        assert count_to_level(0, t) == 0
        assert count_to_level(0.5, t) == 1
        assert count_to_level(1.0, t) == 1
        assert count_to_level(1.5, t) == 2
        assert count_to_level(2.5, t) == 3


class TestProcessCreases:
    """Test cell binning and the saturation ceiling."""

    @pytest.fixture
    def cross(self):
        return [
            make_crease(0, 0, 100, 100, 0, weight=0.3),
            make_crease(0, 100, 100, 0, 1, weight=0.4),
        ]

    def test_binning(self, cross):
        density = process_creases(cross, 2, 2, 50, 50)
        assert list(density.cell_weights) == [(1, 1)]
        assert density.cell_weights[(1, 1)] == pytest.approx(0.7)
        assert density.cell_max_gap[(1, 1)] == 1
        assert density.cell_counts[(1, 1)] == 1
        assert density.levels.shape == (2, 2)
        assert density.levels[1, 1] == 1
        assert density.levels.sum() == 1
        assert density.accent_cells == [(1, 1)]
        assert density.active_cell_count == 1
        assert density.level_at(1, 1) == 1
        assert density.level_at(0, 0) == 0

    def test_out_of_grid_dropped(self, cross):
        density = process_creases(cross, 1, 1, 40, 40)
        assert density.cell_weights == {}
        assert len(density.intersections) == 1
        assert density.accent_cells == []

    def test_saturation_ceiling(self):
        creases = [
            make_crease(0, 0, 100, 100, 0, weight=1.0),
            make_crease(0, 100, 100, 0, 1, weight=1.0),
        ]
        density = process_creases(creases, 1, 1, 100, 100)
        # ceiling 0.5, total 2: ratio 0.25 softened to 0.475
        assert density.cell_weights[(0, 0)] == pytest.approx(2.0 * 0.475)

    def test_ceiling_multiplier(self):
        creases = [
            make_crease(0, 0, 100, 100, 0, weight=1.0),
            make_crease(0, 100, 100, 0, 1, weight=1.0),
        ]
        paper = PaperProperties(absorbency=0.5, ceiling_multiplier=4.0)
        density = process_creases(creases, 1, 1, 100, 100, paper)
        assert density.cell_weights[(0, 0)] == pytest.approx(2.0)

    def test_counts_match_in_grid_intersections(self):
        sim = simulate_folds(910, 1407, 150, 9)
        density = process_creases(sim.creases, 13, 21, 70, 67)
        in_grid = [
            i for i in density.intersections
            if 0 <= i.point.x // 70 < 13 and 0 <= i.point.y // 67 < 21
        ]
        assert sum(density.cell_counts.values()) == len(in_grid)
        assert set(np.unique(density.levels)) <= {0, 1, 2, 3}

    def test_fold_target_cell_clamped(self):
        assert fold_target_cell(None, 10, 10, 3, 3) is None
        assert fold_target_cell(Point(25, 5), 10, 10, 3, 3) == (2, 0)
        assert fold_target_cell(Point(500, -4), 10, 10, 3, 3) == (2, 0)
