"""Brightness / contrast / gamma adjustment of 0-255 samples."""

from __future__ import annotations

import numpy as np

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def contrast_factor(contrast: float) -> float:
    """Contrast multiplier for contrast in [-100, 100] (0 = no change)."""
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def adjust_tone(
    values: np.ndarray | float,
    brightness: float = 0,
    contrast: float = 0,
    gamma: float = 1.0,
) -> np.ndarray:
    """Apply contrast, brightness and gamma to samples in [0, 255].

    Works elementwise, so the same transform serves a luminance plane or
    each RGB channel independently.

    Args:
        values: scalar or array of samples in [0, 255].
        brightness: offset added after contrast, -100 to 100.
        contrast: -100 to 100, scaled around the 128 midpoint.
        gamma: > 0. 1.0 leaves the clamped value unchanged.

    Returns:
        New float64 array in [0, 255]. The input is not modified.
    """
    result = np.asarray(values, dtype=np.float64)
    result = contrast_factor(contrast) * (result - 128) + 128 + brightness
    result = np.clip(result, 0.0, 255.0)
    if gamma != 1.0:
        result = 255 * np.power(result / 255, 1 / gamma)
    return result


def luminance(rgba: np.ndarray) -> np.ndarray:
    """Weighted grayscale of an (H, W, 3+) array, as float64 in [0, 255]."""
    return rgba[..., :3].astype(np.float64) @ LUMA_WEIGHTS


def adjust_channels(
    rgba: np.ndarray,
    brightness: float = 0,
    contrast: float = 0,
    gamma: float = 1.0,
) -> np.ndarray:
    """Tone-adjust R, G and B of an RGBA array into a new uint8 copy.

    Alpha is copied through. Adjusted values are rounded half-to-even, which
    is how a clamped byte array stores a float.
    """
    out = rgba.copy()
    adjusted = adjust_tone(rgba[..., :3], brightness, contrast, gamma)
    out[..., :3] = np.clip(np.rint(adjusted), 0, 255).astype(np.uint8)
    return out
