"""Tests for the fold simulation."""

import pytest

from py_fold.core.fold_simulator import FoldSimulator, simulate_folds
from py_fold.core.fold_strategy import (
    Clustered,
    Diagonal,
    FoldStrategyType,
    Horizontal,
    Radial,
    Random,
    Vertical,
    generate_fold_strategy,
)
from py_fold.core.geometry import PointType
from py_fold.core.paper import (
    PaperProperties,
    WeightRange,
    generate_max_folds,
    generate_paper_properties,
    generate_weight_range,
    get_paper_description,
)

WIDTH = 910
HEIGHT = 1407


def crease_points(simulation):
    return [(c.p1, c.p2) for c in simulation.creases]


class TestSimulateFolds:
    """Test the fold state machine."""

    @pytest.fixture
    def simulation(self):
        return simulate_folds(WIDTH, HEIGHT, 120, 42)

    def test_zero_folds_is_empty(self):
        sim = simulate_folds(WIDTH, HEIGHT, 0, 42)
        assert sim.crease_count == 0
        assert sim.first_fold_target is None
        assert sim.last_fold_target is None

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-5, 100)])
    def test_degenerate_sheet_is_empty(self, width, height):
        sim = simulate_folds(width, height, 50, 42)
        assert sim.crease_count == 0

    def test_deterministic(self, simulation):
        again = simulate_folds(WIDTH, HEIGHT, 120, 42)
        assert crease_points(again) == crease_points(simulation)
        assert [c.weight for c in again.creases] == [c.weight for c in simulation.creases]

    def test_different_seeds_differ(self, simulation):
        other = simulate_folds(WIDTH, HEIGHT, 120, 43)
        assert crease_points(other) != crease_points(simulation)

    def test_creases_inside_sheet(self):
        for seed in range(25):
            sim = simulate_folds(WIDTH, HEIGHT, 60, seed)
            for crease in sim.creases:
                for point in (crease.p1, crease.p2):
                    assert -1e-6 <= point.x <= WIDTH + 1e-6
                    assert -1e-6 <= point.y <= HEIGHT + 1e-6

    def test_depth_is_insertion_index(self, simulation):
        assert [c.depth for c in simulation.creases] == list(range(simulation.crease_count))
        assert simulation.crease_endpoints().shape == (simulation.crease_count, 4)

    def test_weights_stay_above_floor(self):
        for seed in range(10):
            sim = simulate_folds(WIDTH, HEIGHT, 300, seed)
            for crease in sim.creases:
                assert crease.weight >= 0.01

    def test_plain_paper_registers_every_fold(self):
        sim = simulate_folds(WIDTH, HEIGHT, 40, 7, weight_range=WeightRange(0.5, 1.0))
        assert sim.crease_count == 40

    def test_seed_42_with_mid_weight_range(self):
        sim = simulate_folds(WIDTH, HEIGHT, 50, 42, weight_range=WeightRange(0.3, 0.7))
        assert sim.crease_count == 50
        # Creases of the last cycle have not faded yet
        last_cycle_start = (50 - 1) // sim.max_folds * sim.max_folds
        assert all(0.3 <= c.weight <= 0.7 for c in sim.creases[last_cycle_start:])

    def test_resistant_paper_drops_folds(self):
        paper = PaperProperties(absorbency=0.1)
        sim = simulate_folds(WIDTH, HEIGHT, 200, 7, paper=paper)
        assert sim.crease_count < 200

    def test_cycle_metadata(self, simulation):
        for crease in simulation.creases:
            assert 0 <= crease.cycle_position < simulation.max_folds
            assert 0.001 <= crease.reduction_multiplier <= 0.251

    def test_fold_targets_inside_margin(self, simulation):
        margin = max(WIDTH, HEIGHT) * 0.05
        for target in (simulation.first_fold_target, simulation.last_fold_target):
            assert target is not None
            assert margin <= target.x <= WIDTH - margin
            assert margin <= target.y <= HEIGHT - margin


class TestBreathing:
    """Test weight decay at cycle boundaries."""

    def test_weights_decay_monotonically(self):
        for seed in range(5):
            max_folds = generate_max_folds(seed)
            one_cycle = simulate_folds(WIDTH, HEIGHT, max_folds, seed)
            three_cycles = simulate_folds(WIDTH, HEIGHT, max_folds * 3, seed)

            # Later folds do not change the first cycle's geometry
            prefix = three_cycles.creases[: one_cycle.crease_count]
            assert [(c.p1, c.p2) for c in prefix] == crease_points(one_cycle)

            for before, after in zip(one_cycle.creases, prefix):
                assert after.weight <= before.weight
                assert after.weight >= 0.01


class TestStrategies:
    """Test strategy-specific geometry."""

    def test_horizontal_creases_are_horizontal(self):
        sim = simulate_folds(WIDTH, HEIGHT, 30, 11, strategy=Horizontal(jitter=0))
        assert sim.crease_count > 0
        for crease in sim.creases:
            assert crease.p1.y == pytest.approx(crease.p2.y, abs=1e-9)
            assert {crease.p1.x, crease.p2.x} == {0, WIDTH}

    def test_vertical_creases_are_vertical(self):
        sim = simulate_folds(WIDTH, HEIGHT, 30, 11, strategy=Vertical(jitter=0))
        assert sim.crease_count > 0
        for crease in sim.creases:
            assert crease.p1.x == pytest.approx(crease.p2.x, abs=1e-9)
            assert {crease.p1.y, crease.p2.y} == {0, HEIGHT}

    def test_straight_strategies_start_on_edges(self):
        sim = simulate_folds(WIDTH, HEIGHT, 50, 3, strategy=Horizontal(jitter=10))
        assert all(c.anchor_type == PointType.EDGE for c in sim.creases)

    @pytest.mark.parametrize(
        "strategy",
        [
            Diagonal(angle=45, jitter=10),
            Radial(focal_x=0.3, focal_y=0.6),
            Clustered(cluster_x=0.5, cluster_y=0.5, spread=0.3),
            Random(),
        ],
    )
    def test_other_strategies_produce_creases(self, strategy):
        sim = simulate_folds(WIDTH, HEIGHT, 80, 21, strategy=strategy)
        assert sim.crease_count > 0
        assert sim.strategy is strategy

    def test_later_folds_use_structure(self):
        sim = simulate_folds(WIDTH, HEIGHT, 200, 5, strategy=Random())
        types = {c.anchor_type for c in sim.creases}
        assert types & {PointType.CREASE, PointType.INTERSECTION}

    def test_strategy_distribution_covers_all_types(self):
        types = {generate_fold_strategy(seed).type for seed in range(400)}
        assert types == set(FoldStrategyType)

    def test_relationship_bias_range(self):
        for seed in range(20):
            bias = FoldSimulator(WIDTH, HEIGHT, seed).relationship_bias
            assert 0 <= bias.parallel <= 0.8
            assert 0 <= bias.perpendicular <= 0.8


class TestPaper:
    """Test paper and weight range draws."""

    def test_paper_ranges(self):
        for seed in range(100):
            paper = generate_paper_properties(seed)
            assert 0.1 <= paper.absorbency <= 0.9
            assert paper.intersection_threshold == 0
            assert 0.3 <= paper.ceiling_multiplier <= 1.7
            if paper.has_grain:
                assert 0 <= paper.angle_affinity <= 180
                assert 0.2 <= paper.affinity_strength <= 0.8
            else:
                assert paper.affinity_strength == 0

    def test_paper_description(self):
        paper = PaperProperties(absorbency=0.7, angle_affinity=30.0, affinity_strength=0.5)
        assert get_paper_description(paper) == "Absorbent/Fine/Grain"
        assert get_paper_description(PaperProperties(absorbency=0.2)) == "Resistant/Fine/Uniform"

    def test_weight_range_ordered(self):
        for seed in range(100):
            wr = generate_weight_range(seed)
            assert 0 < wr.min < wr.max <= 1.0

    def test_max_folds_range(self):
        for seed in range(100):
            assert 4 <= generate_max_folds(seed) < 70
