"""Palette posterize with optional Floyd-Steinberg error diffusion."""

from __future__ import annotations

import math

import numpy as np

from dot_maker.core.errors import InvalidParameter, check_thresholds
from dot_maker.core.palette import (
    RGB,
    ColorMode,
    gated_rgb,
    palette_for,
    parse_color_mode,
    quantize,
)
from dot_maker.core.reader import PixelBuffer

# (dx, dy, weight)
FLOYD_STEINBERG = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


def _clamp_byte(value: float) -> int:
    """Round half up and clamp to [0, 255]."""
    return min(255, max(0, math.floor(value + 0.5)))


def spread_error(
    work: np.ndarray,
    x: int,
    y: int,
    error: tuple[int, int, int],
    weight: float,
) -> None:
    """Add weight * error to the RGB of pixel (x, y) in place, if it exists."""
    h, w = work.shape[:2]
    if not (0 <= x < w and 0 <= y < h):
        return
    for c in range(3):
        work[y, x, c] = _clamp_byte(work[y, x, c] + error[c] * weight)


def _posterize(
    data: np.ndarray,
    palette: tuple[RGB, ...],
    black_threshold: float,
    white_threshold: float,
) -> np.ndarray:
    """Vectorized gate + quantize for the no-diffusion case."""
    out = data.copy()
    rgb = data[..., :3].astype(np.int64)
    brightness = rgb.sum(axis=-1) / (3 * 255)
    quantized = quantize(rgb, palette)
    quantized[brightness <= black_threshold] = 0
    quantized[(brightness > black_threshold) & (brightness >= white_threshold)] = 255
    out[..., :3] = quantized
    return out


def palette_dither(
    buffer: PixelBuffer,
    color_mode: ColorMode,
    black_threshold: float = 0.05,
    white_threshold: float = 0.85,
    diffuse: bool = True,
) -> PixelBuffer:
    """Reduce an image to a fixed palette plus pure black and white.

    Pixels at or below black_threshold brightness become black, at or above
    white_threshold become white, everything else takes the nearest palette
    color. With diffuse=True the quantization error of each pixel is pushed
    onto its unvisited neighbours.

    Args:
        buffer: source image, left untouched.
        color_mode: cmyk or rybk.
        black_threshold: 0 to 1.
        white_threshold: 0 to 1.
        diffuse: apply Floyd-Steinberg error diffusion.

    Returns:
        A new PixelBuffer with alpha copied from the source.
    """
    buffer.validate()
    check_thresholds(black_threshold, white_threshold)
    color_mode = parse_color_mode(color_mode)
    if color_mode == ColorMode.MONOCHROME:
        raise InvalidParameter("palette_dither needs a cmyk or rybk color mode")
    palette = palette_for(color_mode)

    if not diffuse:
        return PixelBuffer(
            buffer.width,
            buffer.height,
            _posterize(buffer.data, palette, black_threshold, white_threshold),
        )

    work = buffer.data.astype(np.int32)
    h, w = work.shape[:2]

    for y in range(h):
        for x in range(w):
            old = (int(work[y, x, 0]), int(work[y, x, 1]), int(work[y, x, 2]))
            new = gated_rgb(*old, palette, black_threshold, white_threshold)
            work[y, x, :3] = new

            error = (old[0] - new[0], old[1] - new[1], old[2] - new[2])
            for dx, dy, weight in FLOYD_STEINBERG:
                spread_error(work, x + dx, y + dy, error, weight)

    return PixelBuffer(buffer.width, buffer.height, work.astype(np.uint8))
