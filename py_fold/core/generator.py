"""
Composition pipeline.

seed -> grid layout -> fold simulation in the grid's extents -> density
levels, and seed + crease count -> palette. Everything is computed in
reference space; ``GenerationResult.scaled_layout`` maps it onto an output
canvas without drawing any further randomness.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import structlog

from ..config import Settings, settings as default_settings
from ..utils.random import FOLD_COUNT_OFFSET, make_stream
from .density import Cell, CellDensity, fold_target_cell, process_creases
from .fold_simulator import Crease, FoldSimulation, simulate_folds
from .fold_strategy import FoldStrategy, generate_fold_strategy
from .grid_layout import (
    CellSize,
    GapInfo,
    GridLayout,
    calculate_grid_with_gaps,
    generate_cell_dimensions,
    generate_gap_info,
    inner_extent,
)
from .palette import Palette, gradient_probability, js_round, resolve_palette
from .paper import (
    PaperProperties,
    WeightRange,
    generate_max_folds,
    generate_paper_properties,
    generate_weight_range,
    get_paper_description,
)
from .traits import (
    DrawDirection,
    FoldMetadata,
    MarginSize,
    OverlapInfo,
    RenderMode,
    TraitAttribute,
    generate_cell_overflow,
    generate_draw_direction,
    generate_margin_size,
    generate_overlap_info,
    generate_rare_analytics_mode,
    generate_rare_cell_outlines,
    generate_rare_crease_lines,
    generate_rare_hit_counts,
    generate_render_mode,
    generate_show_empty_cells,
)

logger = structlog.get_logger()


@dataclass
class GenerationResult:
    """Everything derived from one seed and fold count."""

    seed: int
    fold_count: int
    cell_size: CellSize
    layout: GridLayout
    gap_info: GapInfo
    weight_range: WeightRange
    strategy: FoldStrategy
    paper: PaperProperties
    max_folds: int
    simulation: FoldSimulation
    density: CellDensity
    palette: Palette
    gradient_mode: bool
    gradient_probability: float
    multi_color: bool
    render_mode: RenderMode
    show_empty_cells: bool
    draw_direction: DrawDirection
    margin: MarginSize
    cell_overflow: int
    overlap_info: OverlapInfo
    show_cell_outlines: bool
    show_hit_counts: bool
    show_crease_lines: bool
    analytics_mode: bool
    first_fold_target_cell: Optional[Cell] = None
    last_fold_target_cell: Optional[Cell] = None
    reference_width: int = 1200
    reference_height: int = 1697

    @property
    def creases(self) -> List[Crease]:
        return self.simulation.creases

    @property
    def crease_count(self) -> int:
        return self.simulation.crease_count

    def scaled_layout(self, output_width: float, output_height: float) -> GridLayout:
        return self.layout.scaled(
            output_width, output_height, self.reference_width, self.reference_height
        )

    def scaled_creases(
        self, output_width: float, output_height: float
    ) -> List[Tuple[float, float, float, float]]:
        """Crease endpoints in output pixels, relative to the grid origin."""
        sx = output_width / self.reference_width
        sy = output_height / self.reference_height
        return [
            (c.p1.x * sx, c.p1.y * sy, c.p2.x * sx, c.p2.y * sy)
            for c in self.simulation.creases
        ]

    def palette_strategy_label(self) -> str:
        percent = js_round(self.gradient_probability * 100)
        if self.gradient_mode:
            anchor = self.palette.anchor_type.value if self.palette.anchor_type else "background"
            return f"gradient/{anchor} ({percent}% @ {self.crease_count} creases)"
        return (
            f"cga/{self.palette.strategy} "
            f"({percent}% gradient @ {self.crease_count} creases)"
        )

    def to_metadata(self, token_id, image_base_url: str = "") -> FoldMetadata:
        """Project the result onto token metadata."""
        attributes = [
            TraitAttribute(trait_type="Fold Strategy", value=self.strategy.type.value),
            TraitAttribute(trait_type="Render Mode", value=self.render_mode.value),
            TraitAttribute(trait_type="Multi-Color", value="Yes" if self.multi_color else "No"),
            TraitAttribute(trait_type="Cell Size", value=str(self.cell_size)),
            TraitAttribute(trait_type="Fold Count", value=self.fold_count),
            TraitAttribute(trait_type="Max Folds", value=self.max_folds),
            TraitAttribute(trait_type="Crease Count", value=self.crease_count),
            TraitAttribute(trait_type="Palette Strategy", value=self.palette_strategy_label()),
            TraitAttribute(trait_type="Paper Type", value=get_paper_description(self.paper)),
            TraitAttribute(
                trait_type="Paper Grain",
                value="Grain" if self.paper.has_grain else "Uniform",
            ),
        ]
        if self.show_crease_lines:
            attributes.append(TraitAttribute(trait_type="Crease Lines", value="Visible"))

        return FoldMetadata(
            name=f"Fold #{token_id}",
            image=f"{image_base_url}/{token_id}" if image_base_url else "",
            attributes=attributes,
        )


def generate_fold_count(seed: int, max_count: int = 500) -> int:
    """Seeded fold count in [1, max_count]."""
    rng = make_stream(seed, FOLD_COUNT_OFFSET)
    return math.floor(1 + rng() * max_count)


def generate(
    seed: int,
    num_folds: Optional[int] = None,
    reference_width: Optional[int] = None,
    reference_height: Optional[int] = None,
    padding: Optional[int] = None,
    strategy: Optional[FoldStrategy] = None,
    paper: Optional[PaperProperties] = None,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    """
    Generate a composition.

    Args:
        seed: Composition seed
        num_folds: Fold count, drawn from the seed when None
        reference_width: Reference canvas width, from settings when None
        reference_height: Reference canvas height, from settings when None
        padding: Padding inside the drawing margin, from settings when None
        strategy: Fold strategy override
        paper: Paper override

    Returns:
        GenerationResult
    """
    cfg = settings or default_settings
    ref_w = reference_width if reference_width is not None else cfg.reference_width
    ref_h = reference_height if reference_height is not None else cfg.reference_height
    pad = padding if padding is not None else cfg.padding

    weight_range = generate_weight_range(seed)
    strategy = strategy or generate_fold_strategy(seed)
    max_folds = generate_max_folds(seed)
    paper = paper or generate_paper_properties(seed)

    fold_count = num_folds
    if fold_count is None:
        fold_count = generate_fold_count(seed, cfg.max_fold_count)

    cell_size = generate_cell_dimensions(
        pad,
        seed,
        reference_width=ref_w,
        reference_height=ref_h,
        drawing_margin=cfg.drawing_margin,
        cell_min=cfg.cell_min,
        cell_max=cfg.cell_max,
        cell_aspect_max=cfg.cell_aspect_max,
    )
    inner_w, inner_h = inner_extent(pad, ref_w, ref_h, cfg.drawing_margin)
    layout = calculate_grid_with_gaps(seed, cell_size.width, cell_size.height, inner_w, inner_h)
    gap_info = generate_gap_info(
        seed, cell_size.width, cell_size.height, inner_w, inner_h, layout=layout
    )

    simulation = simulate_folds(
        layout.grid_width,
        layout.grid_height,
        fold_count,
        seed,
        weight_range=weight_range,
        strategy=strategy,
        paper=paper,
    )

    # Gaps and overlaps are honoured by binning on the stride
    density = process_creases(
        simulation.creases,
        layout.cols,
        layout.rows,
        layout.stride_x,
        layout.stride_y,
        paper,
    )

    crease_count = simulation.crease_count
    palette = resolve_palette(seed, crease_count)

    result = GenerationResult(
        seed=seed,
        fold_count=fold_count,
        cell_size=cell_size,
        layout=layout,
        gap_info=gap_info,
        weight_range=weight_range,
        strategy=strategy,
        paper=paper,
        max_folds=max_folds,
        simulation=simulation,
        density=density,
        palette=palette,
        gradient_mode=palette.is_gradient,
        gradient_probability=gradient_probability(crease_count),
        multi_color=not palette.is_gradient and palette.level_colors is not None,
        render_mode=generate_render_mode(seed),
        show_empty_cells=generate_show_empty_cells(seed),
        draw_direction=generate_draw_direction(seed),
        margin=generate_margin_size(seed),
        cell_overflow=generate_cell_overflow(seed),
        overlap_info=generate_overlap_info(seed),
        show_cell_outlines=generate_rare_cell_outlines(seed),
        show_hit_counts=generate_rare_hit_counts(seed),
        show_crease_lines=generate_rare_crease_lines(seed),
        analytics_mode=generate_rare_analytics_mode(seed),
        first_fold_target_cell=fold_target_cell(
            simulation.first_fold_target, layout.stride_x, layout.stride_y, layout.cols, layout.rows
        ),
        last_fold_target_cell=fold_target_cell(
            simulation.last_fold_target, layout.stride_x, layout.stride_y, layout.cols, layout.rows
        ),
        reference_width=ref_w,
        reference_height=ref_h,
    )

    logger.info(
        "Composition generated",
        seed=seed,
        folds=fold_count,
        creases=crease_count,
        cells=f"{layout.cols}x{layout.rows}",
        strategy=strategy.type.value,
        palette=palette.strategy,
        gradient=result.gradient_mode,
    )
    return result


def generate_metadata(token_id, seed: int, fold_count: Optional[int] = None,
                      image_base_url: str = "") -> FoldMetadata:
    """
    Token metadata for a seed.

    Returns:
        FoldMetadata
    """
    result = generate(seed, fold_count)
    return result.to_metadata(token_id, image_base_url)
