"""Tests for palette generation."""

import re

import pytest

from py_fold.core.lcg_prng import LCGRandom
from py_fold.core.palette import (
    BLACK,
    CGA_PALETTE,
    GROUND_POOL,
    AnchorType,
    ContrastType,
    Palette,
    build_gradient_palette,
    derive_mark,
    derive_web_safe_color,
    find_cga_color,
    generate_anchor_type,
    generate_multi_color_palette,
    generate_palette,
    generate_web_safe_gradient_palette,
    gradient_probability,
    js_round,
    luminance_from_hex,
    resolve_palette,
    shift_toward_web_safe,
    snap_to_web_safe,
)

HEX = re.compile(r"^#[0-9A-F]{6}$")
CGA_HEXES = {c.hex for c in CGA_PALETTE}
SEEDS = range(300)


class TestCGAPalette:
    """Test the colour tables."""

    def test_thirteen_colours(self):
        assert len(CGA_PALETTE) == 13
        assert len(CGA_HEXES) == 13

    def test_ground_pool_is_value_committed(self):
        names = [c.name for c in GROUND_POOL]
        assert names == [
            "black", "blue", "red", "magenta", "white", "yellow", "lightCyan", "lightGreen",
        ]

    def test_find_cga_color(self):
        assert find_cga_color("#ffff55").name == "yellow"
        assert find_cga_color("#123456") == BLACK


class TestGeneratePalette:
    """Test ground/mark/accent derivation."""

    def test_deterministic(self):
        assert generate_palette(42) == generate_palette(42)

    def test_colours_are_cga(self):
        for seed in SEEDS:
            palette = generate_palette(seed)
            assert palette.bg in CGA_HEXES
            assert palette.text in CGA_HEXES
            assert palette.accent in CGA_HEXES
            assert palette.color_count in (2, 3)

    def test_contrast_between_ground_and_mark(self):
        for seed in SEEDS:
            palette = generate_palette(seed)
            if palette.strategy.startswith("monochrome/"):
                continue
            bg = find_cga_color(palette.bg)
            text = find_cga_color(palette.text)
            assert abs(bg.luminance - text.luminance) >= 25

    def test_monochrome(self):
        found = False
        for seed in SEEDS:
            palette = generate_palette(seed)
            if palette.strategy.startswith("monochrome/"):
                found = True
                assert palette.color_count == 2
                assert palette.text == palette.accent
                assert palette.bg in ("#000000", "#FFFFFF")
                assert find_cga_color(palette.text).temperature != "neutral"
        assert found

    def test_strategies(self):
        strategies = {generate_palette(seed).strategy.split("/")[0] for seed in SEEDS}
        assert strategies == {"monochrome", "value", "temperature", "complement", "clash"}

    def test_black_ground_value_contrast_gives_light_mark(self):
        for seed in range(100):
            mark = derive_mark(BLACK, ContrastType.VALUE, LCGRandom(seed))
            assert mark.luminance > 60

    def test_unknown_contrast_type(self):
        with pytest.raises(ValueError):
            derive_mark(BLACK, "loud", LCGRandom(1))


class TestWebSafe:
    """Test web-safe colour helpers."""

    @pytest.mark.parametrize("value,expected", [(0, 0), (25, 0), (26, 51), (128, 153), (255, 255)])
    def test_snap(self, value, expected):
        assert snap_to_web_safe(value) == expected

    def test_shift(self):
        assert shift_toward_web_safe("#000000", 1, 2) == "#666666"
        assert shift_toward_web_safe("#FFFFFF", 1, 1) == "#FFFFFF"
        assert shift_toward_web_safe("#AA0000", -1, 1) == "#660000"

    def test_js_round(self):
        assert js_round(127.5) == 128
        assert js_round(0.5) == 1
        assert js_round(-0.5) == 0

    def test_gradient_levels(self):
        assert generate_web_safe_gradient_palette("#000000", "#FFFFFF") == [
            "#333333", "#999999", "#CCCCCC", "#FFFFFF",
        ]

    def test_luminance(self):
        assert luminance_from_hex("#000000") == 0
        assert luminance_from_hex("#FFFFFF") == pytest.approx(1.0)

    def test_derive_is_web_safe(self):
        for seed in range(50):
            for role in ("background", "text", "accent"):
                colour = derive_web_safe_color(seed, "#AA00AA", "#FFFF55", role)
                assert HEX.match(colour)
                for i in (1, 3, 5):
                    assert int(colour[i:i + 2], 16) % 0x33 == 0

    def test_derive_unknown_role(self):
        with pytest.raises(ValueError):
            derive_web_safe_color(1, "#000000", "#FFFFFF", "border")


class TestGradientMode:
    """Test gradient probability and anchored palettes."""

    def test_probability_decays(self):
        assert gradient_probability(0) == pytest.approx(0.35)
        previous = 1.0
        for n in range(0, 500, 10):
            p = gradient_probability(n)
            assert 0.08 < p <= previous
            previous = p
        assert gradient_probability(10_000) == pytest.approx(0.08)

    def test_anchor_types_all_occur(self):
        assert {generate_anchor_type(seed) for seed in range(200)} == set(AnchorType)

    @pytest.fixture
    def cga(self):
        return Palette(bg="#0000AA", text="#FFFF55", accent="#FF55FF", strategy="complement",
                       color_count=3)

    def test_background_anchor_keeps_background(self, cga):
        palette = build_gradient_palette(5, cga, "background")
        assert palette.bg == cga.bg
        assert palette.anchor_type == AnchorType.BACKGROUND
        assert (palette.cga_bg, palette.cga_text, palette.cga_accent) == (
            cga.bg, cga.text, cga.accent,
        )
        assert palette.strategy == cga.strategy

    def test_text_anchor_keeps_text(self, cga):
        palette = build_gradient_palette(5, cga, AnchorType.TEXT)
        assert palette.text == cga.text

    def test_accent_anchor_keeps_accent(self, cga):
        palette = build_gradient_palette(5, cga, AnchorType.ACCENT)
        assert palette.accent == cga.accent
        assert palette.text == derive_web_safe_color(6, cga.text, palette.bg, "text")

    def test_unknown_anchor(self, cga):
        with pytest.raises(ValueError):
            build_gradient_palette(5, cga, "border")


class TestResolvePalette:
    """Test the final palette with level colours."""

    def test_level_colours(self):
        gradient = multi = plain = 0
        for seed in SEEDS:
            palette = resolve_palette(seed, 0)
            if palette.is_gradient:
                gradient += 1
                assert len(palette.level_colors) == 4
                assert palette.level_colors == generate_web_safe_gradient_palette(
                    palette.bg, palette.text
                )
            elif palette.level_colors is not None:
                multi += 1
                assert len(palette.level_colors) == 4
                assert set(palette.level_colors) <= CGA_HEXES
            else:
                plain += 1
        assert gradient and multi and plain

    def test_multi_color_palette_is_cga(self):
        for seed in range(100):
            colours = generate_multi_color_palette(seed, "#000000", "#55FFFF")
            assert len(colours) == 4
            assert set(colours) <= CGA_HEXES
