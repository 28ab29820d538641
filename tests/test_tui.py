"""Tests for the TUI helpers that do not need a running app."""

import pytest
from PIL import Image

from dot_maker.app import DotMakerApp
from dot_maker.core.circles import Circle
from dot_maker.core.errors import InvalidParameter
from dot_maker.core.processor import DotResult, Settings
from dot_maker.tui.controls import apply_field, field_value
from dot_maker.tui.preview import UPPER_HALF, DotPreview, half_block_text
from dot_maker.utils.terminal import fit_to_terminal


class TestFieldValues:
    def test_percent_fields(self):
        s = Settings(black_threshold=0.05, white_threshold=0.85)
        assert field_value(s, "black_threshold") == 5
        assert field_value(s, "white_threshold") == 85

    def test_plain_fields(self):
        assert field_value(Settings(grid_size=12), "grid_size") == 12


class TestApplyField:
    def test_sets_value(self):
        assert apply_field(Settings(), "brightness", 30).brightness == 30

    def test_clamps_to_range(self):
        assert apply_field(Settings(), "grid_size", 500).grid_size == 50
        assert apply_field(Settings(), "contrast", -300).contrast == -100

    def test_percent_conversion(self):
        assert apply_field(Settings(), "white_threshold", 60).white_threshold == pytest.approx(0.6)

    def test_min_radius_pushes_max(self):
        s = apply_field(Settings(min_radius=2, max_radius=10), "min_radius", 15)
        assert (s.min_radius, s.max_radius) == (15, 15)

    def test_white_pulls_black(self):
        s = apply_field(Settings(black_threshold=0.3), "white_threshold", 20)
        assert s.black_threshold == pytest.approx(0.2)
        assert s.white_threshold == pytest.approx(0.2)

    def test_invalid_result_raises(self):
        with pytest.raises(InvalidParameter):
            apply_field(Settings(gamma=0), "brightness", 10)


class TestHalfBlockText:
    def test_even_height(self):
        img = Image.new("RGB", (3, 4), (255, 255, 255))
        text = half_block_text(img)
        assert text.plain == "\n".join([UPPER_HALF * 3] * 2)

    def test_odd_height_padded(self):
        img = Image.new("RGB", (2, 3), (0, 0, 0))
        text = half_block_text(img)
        assert text.plain.count("\n") == 1

    def test_colors(self):
        img = Image.new("RGB", (1, 2), (255, 0, 0))
        img.putpixel((0, 1), (0, 0, 255))
        text = half_block_text(img)
        assert text.spans[0].style == "rgb(255,0,0) on rgb(0,0,255)"


class TestFitToTerminal:
    def test_width_constrained(self):
        assert fit_to_terminal(800, 400, max_width=80, max_height=40) == (80, 20)

    def test_height_constrained(self):
        cols, rows = fit_to_terminal(400, 800, max_width=80, max_height=20)
        assert rows == 20
        assert cols == 20

    def test_minimum_one(self):
        assert fit_to_terminal(1000, 1, max_width=5, max_height=5) == (5, 1)


class TestStatusBar:
    def test_shown_result_updates_status(self, monkeypatch):
        app = DotMakerApp()
        shown = []
        monkeypatch.setattr(app, "_update_status", shown.append)
        result = DotResult(
            circles=[Circle(5, 5, 2, "black"), Circle(15, 5, 1.5, "black")],
            width=20,
            height=10,
            elapsed_ms=12.4,
        )
        app.on_dot_preview_result_shown(DotPreview.ResultShown(result))
        assert shown == ["2 circles in 12 ms (20x10)"]
