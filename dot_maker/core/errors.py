"""Exceptions raised when generator inputs break their preconditions."""

from __future__ import annotations

import math


class InvalidParameter(ValueError):
    """A tuning parameter is outside its allowed range."""


class EmptyBuffer(ValueError):
    """The pixel buffer has no pixels or its data does not match its size."""


def check_range(name: str, value: float, low: float, high: float) -> None:
    """Raise InvalidParameter unless low <= value <= high."""
    if not low <= value <= high:
        raise InvalidParameter(f"{name} must be in [{low}, {high}], got {value}")


def check_tone(brightness: float, contrast: float, gamma: float) -> None:
    check_range("brightness", brightness, -100, 100)
    # Also keeps the contrast factor away from its pole at 259
    check_range("contrast", contrast, -100, 100)
    if not gamma > 0:
        raise InvalidParameter(f"gamma must be > 0, got {gamma}")


def check_thresholds(black_threshold: float, white_threshold: float) -> None:
    check_range("black_threshold", black_threshold, 0.0, 1.0)
    check_range("white_threshold", white_threshold, 0.0, 1.0)
    if black_threshold > white_threshold:
        raise InvalidParameter(
            f"black_threshold ({black_threshold}) must not exceed "
            f"white_threshold ({white_threshold})"
        )


def check_grid_size(grid_size: float) -> None:
    if not math.isfinite(grid_size) or grid_size < 1 or int(grid_size) != grid_size:
        raise InvalidParameter(f"grid_size must be an integer >= 1, got {grid_size}")


def check_radii(min_radius: float, max_radius: float) -> None:
    if not (math.isfinite(min_radius) and math.isfinite(max_radius)):
        raise InvalidParameter(
            f"radii must be finite, got min_radius={min_radius}, max_radius={max_radius}"
        )
    if not min_radius > 0:
        raise InvalidParameter(f"min_radius must be > 0, got {min_radius}")
    if min_radius > max_radius:
        raise InvalidParameter(
            f"min_radius ({min_radius}) must not exceed max_radius ({max_radius})"
        )
