"""Tests for palette quantization and the brightness gate."""

import numpy as np
import pytest

from dot_maker.core.errors import InvalidParameter
from dot_maker.core.palette import (
    CMYK_PALETTE,
    PALETTES,
    RYBK_PALETTE,
    ColorMode,
    dot_color,
    gated_rgb,
    nearest_color,
    parse_color_mode,
    quantize,
    rgb_string,
)


class TestNearestColor:
    @pytest.mark.parametrize("palette", [CMYK_PALETTE, RYBK_PALETTE])
    def test_idempotent(self, palette):
        for color in palette:
            assert nearest_color(*color, palette) == color

    def test_tie_goes_to_first_entry(self):
        # (200, 30, 30) is equally far from magenta and yellow
        assert nearest_color(200, 30, 30, CMYK_PALETTE) == (255, 0, 255)

    def test_gray_ties_to_cyan(self):
        assert nearest_color(128, 128, 128, CMYK_PALETTE) == (0, 255, 255)

    def test_dark_maps_to_black(self):
        assert nearest_color(20, 20, 20, RYBK_PALETTE) == (0, 0, 0)

    def test_reddish_maps_to_red(self):
        assert nearest_color(200, 30, 30, RYBK_PALETTE) == (255, 0, 0)

    def test_accepts_numpy_bytes(self):
        r, g, b = np.array([0, 0, 250], dtype=np.uint8)
        assert nearest_color(r, g, b, RYBK_PALETTE) == (0, 0, 255)


class TestQuantize:
    def test_matches_scalar_version(self):
        rng = np.random.default_rng(7)
        colors = rng.integers(0, 256, size=(200, 3), dtype=np.uint8)
        for palette in PALETTES.values():
            result = quantize(colors, palette)
            for src, got in zip(colors, result):
                assert tuple(int(v) for v in got) == nearest_color(*src, palette)

    def test_preserves_shape(self):
        img = np.zeros((4, 5, 3), dtype=np.uint8)
        assert quantize(img, CMYK_PALETTE).shape == (4, 5, 3)


class TestFormatting:
    def test_rgb_string(self):
        assert rgb_string((0, 255, 255)) == "rgb(0,255,255)"


class TestDotColor:
    def test_monochrome(self):
        assert dot_color(200, 30, 30, ColorMode.MONOCHROME) == "black"

    def test_cmyk(self):
        assert dot_color(0, 250, 240, ColorMode.CMYK) == "rgb(0,255,255)"

    def test_rybk(self):
        assert dot_color(10, 10, 200, ColorMode.RYBK) == "rgb(0,0,255)"


class TestGate:
    def test_below_black_threshold(self):
        assert gated_rgb(10, 10, 10, CMYK_PALETTE, 0.1, 0.9) == (0, 0, 0)

    def test_at_black_threshold(self):
        assert gated_rgb(51, 51, 51, CMYK_PALETTE, 0.2, 0.9) == (0, 0, 0)

    def test_above_white_threshold(self):
        assert gated_rgb(250, 250, 250, RYBK_PALETTE, 0.1, 0.9) == (255, 255, 255)

    def test_monochrome_between(self):
        assert gated_rgb(128, 128, 128, None, 0.1, 0.9) == (0, 0, 0)

    def test_quantized_between(self):
        assert gated_rgb(200, 30, 30, RYBK_PALETTE, 0.1, 0.9) == (255, 0, 0)


class TestParseColorMode:
    def test_accepts_names(self):
        assert parse_color_mode("rybk") is ColorMode.RYBK
        assert parse_color_mode(ColorMode.CMYK) is ColorMode.CMYK

    def test_unknown_mode(self):
        with pytest.raises(InvalidParameter):
            parse_color_mode("sepia")
