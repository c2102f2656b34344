"""
Python implementation of the linear congruential PRNG used by Fold.

The recurrence is evaluated with exact integer arithmetic so that every
stream matches the on-chain and browser renderers bit for bit.
"""

LCG_MULT = 1103515245
LCG_INC = 12345
LCG_MASK = 0x7FFFFFFF


def _uint31(n):
    """Convert to unsigned 31-bit integer."""
    return int(n) & LCG_MASK


class LCGRandom:
    """
    Seeded LCG stream returning floats in [0, 1].

    A seed of 0 behaves like a seed of 1, otherwise the recurrence would sit
    on a fixed point. Negative seeds use their absolute value.
    """

    def __init__(self, seed):
        """Initialize with an integer seed."""
        self.call_count = 0
        self.seed = seed
        self.state = abs(int(seed)) or 1

    def random(self):
        """Generate next random number."""
        self.call_count += 1
        self.state = _uint31(self.state * LCG_MULT + LCG_INC)
        return self.state / LCG_MASK

    def __call__(self):
        return self.random()

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[min(int(self.random() * len(seq)), len(seq) - 1)]


def seeded_random(seed) -> LCGRandom:
    """Return a callable stream for ``seed``."""
    return LCGRandom(seed)
