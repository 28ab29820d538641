"""Render circle lists to raster images and export them as SVG.

Circles are drawn in list order on a white background, so later circles
cover earlier ones in both outputs.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw

from dot_maker.core.circles import CircleList
from dot_maker.core.processor import DotResult

BACKGROUND = (255, 255, 255)

RASTER_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp", ".bmp")


def _fmt(value: float) -> str:
    """Format a number the way JavaScript stringifies it (10.0 -> "10")."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_svg(circles: CircleList, width: int, height: int) -> str:
    """Serialize circles as a standalone SVG document string.

    No XML declaration and no viewBox; one <circle> element per circle in
    list order.
    """
    parts = [
        f'<svg width="{_fmt(width)}" height="{_fmt(height)}" '
        f'xmlns="http://www.w3.org/2000/svg">'
    ]
    for c in circles:
        parts.append(
            f'<circle cx="{_fmt(c.x)}" cy="{_fmt(c.y)}" r="{_fmt(c.r)}" fill="{c.color}"/>'
        )
    parts.append("</svg>")
    return "".join(parts)


def render_circles(
    circles: CircleList,
    width: int,
    height: int,
    scale: float = 1.0,
    bg_color: tuple[int, int, int] = BACKGROUND,
) -> Image.Image:
    """Draw filled circles onto a new RGB image.

    Args:
        circles: circles in image coordinates.
        width: canvas width in image pixels.
        height: canvas height in image pixels.
        scale: output pixels per image pixel (used for previews).
        bg_color: background color RGB tuple.

    Returns:
        PIL Image of size (width * scale, height * scale), at least 1x1.
    """
    out_w = max(1, round(width * scale))
    out_h = max(1, round(height * scale))
    img = Image.new("RGB", (out_w, out_h), bg_color)
    draw = ImageDraw.Draw(img)
    for c in circles:
        draw.ellipse([v * scale for v in c.bbox], fill=c.color)
    return img


def render_to_image(result: DotResult, scale: float = 1.0) -> Image.Image:
    """Render a DotResult at its own canvas size."""
    return render_circles(result.circles, result.width, result.height, scale)


def save_svg(result: DotResult, output_path: Path) -> None:
    Path(output_path).write_text(
        to_svg(result.circles, result.width, result.height), encoding="utf-8"
    )


def save_raster(result: DotResult, output_path: Path) -> None:
    render_to_image(result).save(str(output_path))


def save_output(result: DotResult, output_path: Path) -> None:
    """Save in a format determined by the output file extension."""
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix == ".svg":
        save_svg(result, output_path)
    elif suffix in RASTER_SUFFIXES:
        save_raster(result, output_path)
    else:
        raise ValueError(f"Unsupported output format: {suffix}")
