"""Configuration management."""

import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Reference canvas (A4 portrait, 1:sqrt(2)) in which every seed is laid out
REFERENCE_WIDTH = 1200
REFERENCE_HEIGHT = 1697
DRAWING_MARGIN = 145  # ~12.1% of width

CELL_MIN = 20
CELL_MAX = 600
CELL_ASPECT_MAX = 3

# Glyph metrics of the on-chain font, as fractions of the font size
CHAR_WIDTH_RATIO = 0.6
CHAR_TOP_OVERFLOW = 0.08
CHAR_BOTTOM_OVERFLOW_DARK = 0.06

MAX_FOLD_COUNT = 500

# Load .env for local runs only where the environment leaves values unset
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    for k, v in file_env.items():
        if k.startswith("PY_FOLD_") and k not in os.environ and v is not None:
            os.environ[k] = v


class Settings(BaseSettings):
    """Generation settings pulled from ``PY_FOLD_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="PY_FOLD_", extra="ignore")

    # Reference space
    reference_width: int = Field(default=REFERENCE_WIDTH, gt=0, description="Reference canvas width")
    reference_height: int = Field(default=REFERENCE_HEIGHT, gt=0, description="Reference canvas height")
    drawing_margin: int = Field(default=DRAWING_MARGIN, ge=0, description="Fixed drawing margin")
    padding: int = Field(default=0, ge=0, description="Extra padding inside the margin")

    # Grid cells
    cell_min: int = Field(default=CELL_MIN, gt=0, description="Smallest cell side")
    cell_max: int = Field(default=CELL_MAX, gt=0, description="Largest cell side")
    cell_aspect_max: float = Field(default=CELL_ASPECT_MAX, ge=1, description="Max cell aspect ratio")

    # Folding
    max_fold_count: int = Field(default=MAX_FOLD_COUNT, gt=0, description="Upper bound for seeded fold counts")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    @property
    def inner_width(self) -> int:
        """Drawable width once margin and padding are removed on both sides."""
        return self.reference_width - self.padding * 2 - self.drawing_margin * 2

    @property
    def inner_height(self) -> int:
        """Drawable height once margin and padding are removed on both sides."""
        return self.reference_height - self.padding * 2 - self.drawing_margin * 2


settings = Settings()
