"""
Deterministic paper-folding compositions.
"""

from .core.generator import GenerationResult, generate, generate_metadata

__version__ = "0.1.0"

__all__ = ['GenerationResult', 'generate', 'generate_metadata']
