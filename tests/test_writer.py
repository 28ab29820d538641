"""Tests for raster rendering and SVG export."""

import pytest
from PIL import Image

from dot_maker.core.circles import Circle
from dot_maker.core.processor import DotResult
from dot_maker.core.writer import (
    render_circles,
    render_to_image,
    save_output,
    to_svg,
)


def _make_result(circles=None, width=100, height=50) -> DotResult:
    if circles is None:
        circles = [Circle(10, 20, 5, "#000000")]
    return DotResult(circles=circles, width=width, height=height)


class TestToSvg:
    def test_single_circle(self):
        svg = to_svg([Circle(10, 20, 5, "#000000")], 100, 50)
        assert svg == (
            '<svg width="100" height="50" xmlns="http://www.w3.org/2000/svg">'
            '<circle cx="10" cy="20" r="5" fill="#000000"/></svg>'
        )

    def test_empty(self):
        assert to_svg([], 3, 4) == (
            '<svg width="3" height="4" xmlns="http://www.w3.org/2000/svg"></svg>'
        )

    def test_number_formatting(self):
        svg = to_svg([Circle(2.5, 7.0, 0.125, "rgb(0,255,255)")], 10, 10)
        assert '<circle cx="2.5" cy="7" r="0.125" fill="rgb(0,255,255)"/>' in svg

    def test_order_preserved(self):
        circles = [Circle(1, 1, 1, "black"), Circle(2, 2, 1, "rgb(255,0,0)")]
        svg = to_svg(circles, 5, 5)
        assert svg.index('fill="black"') < svg.index('fill="rgb(255,0,0)"')

    def test_no_xml_declaration_or_viewbox(self):
        svg = to_svg([Circle(1, 1, 1, "black")], 5, 5)
        assert not svg.startswith("<?xml")
        assert "viewBox" not in svg


class TestRender:
    def test_white_background(self):
        img = render_circles([], 20, 10)
        assert img.size == (20, 10)
        assert img.mode == "RGB"
        assert img.getpixel((5, 5)) == (255, 255, 255)

    def test_draws_circle(self):
        img = render_to_image(_make_result())
        assert img.getpixel((10, 20)) == (0, 0, 0)
        assert img.getpixel((50, 40)) == (255, 255, 255)

    def test_later_circles_on_top(self):
        circles = [Circle(10, 10, 6, "black"), Circle(10, 10, 3, "rgb(255,0,0)")]
        img = render_circles(circles, 20, 20)
        assert img.getpixel((10, 10)) == (255, 0, 0)
        assert img.getpixel((10, 6)) == (0, 0, 0)

    def test_scale(self):
        img = render_circles([Circle(10, 10, 4, "black")], 20, 20, scale=0.5)
        assert img.size == (10, 10)
        assert img.getpixel((5, 5)) == (0, 0, 0)


class TestSaveOutput:
    def test_save_svg(self, tmp_path):
        out = tmp_path / "dots.svg"
        save_output(_make_result(), out)
        assert out.read_text(encoding="utf-8") == to_svg(
            [Circle(10, 20, 5, "#000000")], 100, 50
        )

    def test_save_png(self, tmp_path):
        out = tmp_path / "dots.png"
        save_output(_make_result(), out)
        img = Image.open(out)
        assert img.format == "PNG"
        assert img.size == (100, 50)

    def test_unsupported(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            save_output(_make_result(), tmp_path / "dots.gifv")
