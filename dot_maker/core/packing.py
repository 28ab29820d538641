"""Stochastic circle packing driven by local darkness.

Random points are drawn over the image; each one that passes the brightness
gate gets the largest non-overlapping circle that local darkness, the image
edges and the occupancy map allow. Placement is greedy and never revisited.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from dot_maker.core.circles import Circle, CircleList
from dot_maker.core.errors import check_radii, check_thresholds, check_tone
from dot_maker.core.palette import ColorMode, dot_color, mean_brightness, parse_color_mode
from dot_maker.core.reader import PixelBuffer
from dot_maker.core.tone import adjust_channels

logger = logging.getLogger(__name__)

# Budgets as fractions of the pixel count
MAX_ATTEMPTS_RATIO = 0.1
COVERAGE_RATIO = 0.5

RADIUS_STEP = 0.5


class OccupancyMap:
    """Per-pixel record of which pixels a placed circle already covers.

    Cells only ever go from free to covered.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._grid = np.zeros((height, width), dtype=bool)

    def _footprint(self, x: float, y: float, r: float) -> tuple[slice, slice, np.ndarray]:
        """Window around (x, y) and the mask of its cells within distance r."""
        top = max(0, math.floor(y - r))
        bottom = min(self.height, math.ceil(y + r))
        left = max(0, math.floor(x - r))
        right = min(self.width, math.ceil(x + r))
        rows, cols = np.ogrid[top:bottom, left:right]
        mask = np.hypot(rows - y, cols - x) <= r
        return slice(top, bottom), slice(left, right), mask

    def is_free(self, x: float, y: float, r: float) -> bool:
        """True if no covered cell lies within r of (x, y)."""
        rows, cols, mask = self._footprint(x, y, r)
        return not np.any(self._grid[rows, cols] & mask)

    def mark(self, x: float, y: float, r: float) -> None:
        rows, cols, mask = self._footprint(x, y, r)
        self._grid[rows, cols] |= mask

    @property
    def filled(self) -> int:
        """Number of covered cells."""
        return int(self._grid.sum())

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the occupancy grid."""
        view = self._grid.view()
        view.flags.writeable = False
        return view


def fits(x: float, y: float, r: float, width: int, height: int) -> bool:
    """True if the circle's bounding box lies inside [0, width) x [0, height)."""
    return x - r >= 0 and x + r < width and y - r >= 0 and y + r < height


def circle_packing(
    buffer: PixelBuffer,
    min_radius: float,
    max_radius: float,
    brightness: float = 0,
    contrast: float = 0,
    gamma: float = 1.0,
    black_threshold: float = 0.05,
    white_threshold: float = 0.85,
    color_mode: ColorMode = ColorMode.MONOCHROME,
    rng: np.random.Generator | None = None,
) -> CircleList:
    """Pack non-overlapping circles whose size follows image darkness.

    Sampling stops once the summed circle area reaches half the image or
    after 0.1 * width * height draws, whichever comes first. Draws whose
    adjusted brightness is at or beyond either threshold are skipped rather
    than forced to black or white.

    Args:
        buffer: source image.
        min_radius: smallest radius allowed, > 0.
        max_radius: largest radius allowed, >= min_radius.
        brightness: -100 to 100.
        contrast: -100 to 100.
        gamma: > 0.
        black_threshold: 0 to 1, at most white_threshold.
        white_threshold: 0 to 1.
        color_mode: monochrome, cmyk or rybk.
        rng: random source. Pass a seeded generator for reproducible output.

    Returns:
        Circles in placement order.

    Raises:
        InvalidParameter: for out-of-range parameters.
        EmptyBuffer: for an empty or malformed buffer.
    """
    buffer.validate()
    check_radii(min_radius, max_radius)
    check_tone(brightness, contrast, gamma)
    check_thresholds(black_threshold, white_threshold)
    color_mode = parse_color_mode(color_mode)
    if rng is None:
        rng = np.random.default_rng()

    width, height = buffer.width, buffer.height
    adjusted = adjust_channels(buffer.data, brightness, contrast, gamma)
    occupancy = OccupancyMap(width, height)

    total = width * height
    max_attempts = total * MAX_ATTEMPTS_RATIO
    coverage_target = total * COVERAGE_RATIO
    filled = 0.0
    attempts = 0
    circles: CircleList = []

    while filled < coverage_target and attempts < max_attempts:
        attempts += 1
        x = rng.random() * width
        y = rng.random() * height
        r8, g8, b8 = adjusted[int(y), int(x), :3]

        level = mean_brightness(r8, g8, b8)
        if level <= black_threshold or level >= white_threshold:
            continue

        r = min(
            x,
            y,
            width - x,
            height - y,
            max_radius,
            min_radius + (max_radius - min_radius) * (1 - level),
        )
        while r >= min_radius:
            if fits(x, y, r, width, height) and occupancy.is_free(x, y, r):
                occupancy.mark(x, y, r)
                circles.append(Circle(x, y, r, dot_color(r8, g8, b8, color_mode)))
                filled += math.pi * r * r
                break
            r -= RADIUS_STEP

    logger.debug(
        "Circle packing: %d dots from %d attempts, coverage estimate %.1f%%",
        len(circles),
        attempts,
        100 * filled / total,
    )
    return circles
