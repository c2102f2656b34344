"""Tests for settings and logging setup."""

import pytest
from pydantic import ValidationError

from py_fold import generate
from py_fold.config import Settings
from py_fold.logging_config import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        cfg = Settings()
        assert cfg.reference_width == 1200
        assert cfg.reference_height == 1697
        assert cfg.inner_width == 910
        assert cfg.inner_height == 1407

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PY_FOLD_PADDING", "5")
        cfg = Settings()
        assert cfg.padding == 5
        assert cfg.inner_width == 900

    def test_negative_padding_rejected(self, monkeypatch):
        monkeypatch.setenv("PY_FOLD_PADDING", "-1")
        with pytest.raises(ValidationError):
            Settings()

    def test_aspect_below_one_rejected(self):
        with pytest.raises(ValidationError):
            Settings(cell_aspect_max=0.5)

    def test_generate_uses_settings(self):
        cfg = Settings(padding=5)
        result = generate(42, 10, settings=cfg)
        assert result.layout.grid_width <= cfg.inner_width + 1e-9
        assert result.layout.grid_height <= cfg.inner_height + 1e-9


class TestLogging:
    """Test logging configuration."""

    @pytest.mark.parametrize("fmt", ["json", "plain"])
    def test_configure(self, fmt):
        configure_logging("DEBUG", fmt)
        generate(1, 5)

    def test_configure_from_settings(self):
        configure_logging()
        generate(2, 5)
