"""
Random number generation utilities.

Every subsystem draws from its own LCG stream keyed by ``seed + offset``.
The offsets below are part of the output contract: changing any of them
changes every seed's composition. Several purposes share an offset and
must keep sharing it.

Python's random and NumPy's random are never used for generation.
"""

import re

from ..core.lcg_prng import LCG_MASK, LCGRandom

# Fold simulation
MAIN_OFFSET = 0
REDUCTION_OFFSET = 1111
MAX_FOLDS_OFFSET = 2222
RELATIONSHIP_BIAS_OFFSET = 2222
FOLD_STRATEGY_OFFSET = 6666
ABSORBENCY_OFFSET = 6666
WEIGHT_RANGE_OFFSET = 7777
CREASE_WEIGHT_OFFSET = 8888
PAPER_OFFSET = 5555

# Layout
CELL_DIMENSIONS_OFFSET = 9999
FOLD_COUNT_OFFSET = 9999
GAP_OFFSET = 12345

# Palette
PALETTE_OFFSET = 0
MULTI_COLOR_PALETTE_OFFSET = 3333
MULTI_COLOR_ENABLED_OFFSET = 4444
GRADIENT_MODE_OFFSET = 77777
GRADIENT_ANCHOR_OFFSET = 88888
DERIVE_BACKGROUND_OFFSET = 11111
DERIVE_TEXT_OFFSET = 22222
DERIVE_ACCENT_OFFSET = 33333

# Rendering traits
RENDER_MODE_OFFSET = 5555
SHOW_EMPTY_CELLS_OFFSET = 5556
MARGIN_SIZE_OFFSET = 7777
RARE_CELL_OUTLINES_OFFSET = 7777
RARE_HIT_COUNTS_OFFSET = 8888
RARE_CREASE_LINES_OFFSET = 9191
RARE_ANALYTICS_OFFSET = 9393
OVERLAP_OFFSET = 11111
CELL_OVERFLOW_OFFSET = 22222
DRAW_DIRECTION_OFFSET = 33333

_HEX_SEED = re.compile(r"^(0x)?[0-9a-fA-F]+$")


def make_stream(seed: int, offset: int = 0) -> LCGRandom:
    """
    Build the stream for one purpose.

    Args:
        seed: Composition seed
        offset: One of the ``*_OFFSET`` constants

    Returns:
        LCGRandom instance keyed by ``seed + offset``
    """
    return LCGRandom(seed + offset)


def hex_seed_to_number(hex_seed) -> int:
    """
    Convert a hex token hash to the numeric seed the generators use.

    Only the first 16 hex digits matter; the value is reduced modulo
    0x7fffffff. Integers pass through unchanged.
    """
    if isinstance(hex_seed, int):
        return hex_seed
    if not isinstance(hex_seed, str) or not _HEX_SEED.match(hex_seed):
        raise ValueError(f"Invalid hex seed: {hex_seed!r}")
    digits = hex_seed[2:] if hex_seed.startswith("0x") else hex_seed
    return int(digits[:16], 16) % LCG_MASK
