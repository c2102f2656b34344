"""Tests for the grid layout solver."""

import pytest

from py_fold.core.grid_layout import (
    CellSize,
    MIN_WIDTH_RATIO,
    calculate_grid_with_gaps,
    gap_ratio_label,
    generate_cell_dimensions,
    generate_gap_info,
    get_divisors,
    inner_extent,
)

SEEDS = range(60)


class TestCellDimensions:
    """Test cell size selection."""

    @pytest.fixture
    def inner(self):
        return inner_extent(0)

    def test_inner_extent_reference(self, inner):
        assert inner == (910, 1407)

    def test_divisors(self):
        assert get_divisors(910, 20, 600) == [26, 35, 65, 70, 91, 130, 182, 455]
        assert get_divisors(1407, 20, 600) == [21, 67, 201, 469]

    def test_cells_divide_inner_area(self, inner):
        inner_w, inner_h = inner
        for seed in SEEDS:
            size = generate_cell_dimensions(0, seed)
            assert inner_w % size.width == 0
            assert inner_h % size.height == 0

    def test_cells_respect_aspect_and_glyph_fit(self):
        for seed in SEEDS:
            w, h = generate_cell_dimensions(0, seed)
            assert max(w / h, h / w) <= 3
            assert w >= h * MIN_WIDTH_RATIO

    def test_deterministic(self):
        assert generate_cell_dimensions(0, 99) == generate_cell_dimensions(0, 99)

    def test_no_valid_pair_falls_back(self):
        # Inner width 1009 is prime, so only the fallback width 8 remains
        size = generate_cell_dimensions(0, 5, reference_width=1009 + 290)
        assert size == CellSize(8, 12)

    def test_cell_size_label(self):
        assert str(CellSize(35, 67)) == "35x67"


class TestGridWithGaps:
    """Test gap placement."""

    def test_grid_fits_inner_area(self):
        for seed in SEEDS:
            w, h = generate_cell_dimensions(0, seed)
            layout = calculate_grid_with_gaps(seed, w, h, 910, 1407)
            assert layout.cols >= 1
            assert layout.rows >= 1
            assert layout.grid_width <= 910 + 1e-9
            assert layout.grid_height <= 1407 + 1e-9
            assert layout.offset_x >= 0
            assert layout.offset_y >= 0
            assert layout.stride_x == pytest.approx(layout.cell_width + layout.col_gap)
            assert layout.stride_y == pytest.approx(layout.cell_height + layout.row_gap)

    def test_single_column_spans_width(self):
        layout = calculate_grid_with_gaps(1, 800, 20, 910, 1407)
        assert layout.cols == 1
        assert layout.cell_width == 910
        assert layout.col_gap == 0
        assert layout.offset_x == 0

    def test_gap_is_zero_with_one_column(self):
        for seed in SEEDS:
            layout = calculate_grid_with_gaps(seed, 455, 469, 910, 1407)
            if layout.cols == 1:
                assert layout.col_gap == 0
            if layout.rows == 1:
                assert layout.row_gap == 0

    def test_scaled_layout(self):
        layout = calculate_grid_with_gaps(8, 35, 67, 910, 1407)
        scaled = layout.scaled(2400, 3394)
        assert scaled.cols == layout.cols
        assert scaled.rows == layout.rows
        assert scaled.cell_width == pytest.approx(layout.cell_width * 2)
        assert scaled.stride_y == pytest.approx(layout.stride_y * 2)
        assert scaled.offset_x == pytest.approx(layout.offset_x * 2)


class TestGapInfo:
    """Test gap labels."""

    @pytest.mark.parametrize(
        "ratio,label",
        [
            (0, "none"),
            (0.005, "none"),
            (-0.5, "-1/2 (50% overlap)"),
            (-1 / 16, "-1/16 (6.25% overlap)"),
            (1 / 64, "1/64"),
            (1.0, "1x"),
            (2.0, "2x"),
            (0.3, "30%"),
            (-0.3, "-30% overlap"),
        ],
    )
    def test_labels(self, ratio, label):
        assert gap_ratio_label(ratio) == label

    def test_info_matches_layout(self):
        for seed in SEEDS:
            layout = calculate_grid_with_gaps(seed, 35, 67, 910, 1407)
            info = generate_gap_info(seed, 35, 67, 910, 1407)
            assert info.col_gap_ratio == pytest.approx(layout.col_gap / layout.cell_width)
            assert info.has_overlap == (
                info.col_gap_ratio < -0.01 or info.row_gap_ratio < -0.01
            )
            if info.has_overlap:
                assert info.has_gaps
