"""Uniform grid halftone: one dot per fixed-size cell."""

from __future__ import annotations

import logging
import math

import numpy as np

from dot_maker.core.circles import Circle, CircleList
from dot_maker.core.errors import check_grid_size, check_thresholds, check_tone
from dot_maker.core.palette import ColorMode, dot_color, parse_color_mode
from dot_maker.core.reader import PixelBuffer
from dot_maker.core.tone import adjust_tone, luminance

logger = logging.getLogger(__name__)

# Dots this small or smaller are dropped
MIN_DOT_RADIUS = 0.5


def cell_means(gray: np.ndarray, grid_size: int) -> np.ndarray:
    """Mean of each grid_size x grid_size cell of a 2D array.

    The last row and column of cells may be partial; their mean covers only
    the pixels they contain. Returns shape (ceil(h/g), ceil(w/g)).
    """
    h, w = gray.shape
    rows = math.ceil(h / grid_size)
    cols = math.ceil(w / grid_size)
    means = np.zeros((rows, cols), dtype=np.float32)
    for row in range(rows):
        for col in range(cols):
            block = gray[
                row * grid_size : (row + 1) * grid_size,
                col * grid_size : (col + 1) * grid_size,
            ]
            means[row, col] = block.mean(dtype=np.float64)
    return means


def uniform_grid_halftone(
    buffer: PixelBuffer,
    grid_size: int,
    brightness: float = 0,
    contrast: float = 0,
    gamma: float = 1.0,
    black_threshold: float = 0.05,
    white_threshold: float = 0.85,
    color_mode: ColorMode = ColorMode.MONOCHROME,
) -> CircleList:
    """Halftone an image into one circle per grid cell.

    Each cell's mean tone-adjusted luminance picks its dot: at or below the
    black threshold a full black dot, at or above the white threshold no dot,
    otherwise a dot that grows as the cell darkens. Colored modes quantize the
    cell's top-left source pixel (unadjusted), not the cell mean.

    Args:
        buffer: source image.
        grid_size: cell edge length in pixels, >= 1.
        brightness: -100 to 100.
        contrast: -100 to 100.
        gamma: > 0.
        black_threshold: 0 to 1, at most white_threshold.
        white_threshold: 0 to 1.
        color_mode: monochrome, cmyk or rybk.

    Returns:
        Circles in row-major cell order.

    Raises:
        InvalidParameter: for out-of-range parameters.
        EmptyBuffer: for an empty or malformed buffer.
    """
    buffer.validate()
    check_grid_size(grid_size)
    grid_size = int(grid_size)
    check_tone(brightness, contrast, gamma)
    check_thresholds(black_threshold, white_threshold)
    color_mode = parse_color_mode(color_mode)

    gray = adjust_tone(luminance(buffer.data), brightness, contrast, gamma)
    means = cell_means(gray.astype(np.float32), grid_size)

    black_level = black_threshold * 255
    white_level = white_threshold * 255
    span = (white_threshold - black_threshold) * 255
    half = grid_size / 2

    circles: CircleList = []
    rows, cols = means.shape
    for row in range(rows):
        for col in range(cols):
            value = float(means[row, col])
            cx = col * grid_size + half
            cy = row * grid_size + half

            if value <= black_level:
                circles.append(Circle(cx, cy, half, "black"))
                continue
            if value >= white_level:
                continue

            # span > 0 here: black_level < value < white_level
            norm = min(1.0, max(0.0, (value - black_level) / span))
            radius = half * (1 - norm)
            if radius <= MIN_DOT_RADIUS:
                continue

            r, g, b = buffer.data[row * grid_size, col * grid_size, :3]
            circles.append(Circle(cx, cy, radius, dot_color(r, g, b, color_mode)))

    logger.debug(
        "Grid halftone: %dx%d cells of %dpx, %d dots", cols, rows, grid_size, len(circles)
    )
    return circles
