"""
Core composition functionality.
"""

from .lcg_prng import LCGRandom, seeded_random
from .fold_strategy import FoldStrategyType, generate_fold_strategy
from .paper import PaperProperties, WeightRange, generate_paper_properties
from .fold_simulator import Crease, FoldSimulation, FoldSimulator, simulate_folds
from .density import CellDensity, find_intersections, process_creases
from .grid_layout import GridLayout, calculate_grid_with_gaps, generate_cell_dimensions
from .palette import Palette, generate_palette, resolve_palette
from .generator import GenerationResult, generate, generate_metadata

__all__ = ['LCGRandom', 'seeded_random', 'FoldStrategyType', 'generate_fold_strategy',
           'PaperProperties', 'WeightRange', 'generate_paper_properties',
           'Crease', 'FoldSimulation', 'FoldSimulator', 'simulate_folds',
           'CellDensity', 'find_intersections', 'process_creases',
           'GridLayout', 'calculate_grid_with_gaps', 'generate_cell_dimensions',
           'Palette', 'generate_palette', 'resolve_palette',
           'GenerationResult', 'generate', 'generate_metadata']
