"""Fixed dot palettes and nearest-color quantization."""

from __future__ import annotations

from enum import Enum

import numpy as np

from dot_maker.core.errors import InvalidParameter

RGB = tuple[int, int, int]


class ColorMode(str, Enum):
    MONOCHROME = "monochrome"
    CMYK = "cmyk"
    RYBK = "rybk"


# Order matters: ties resolve to the earlier entry
CMYK_PALETTE: tuple[RGB, ...] = (
    (0, 255, 255),  # cyan
    (255, 0, 255),  # magenta
    (255, 255, 0),  # yellow
    (0, 0, 0),  # black
)

RYBK_PALETTE: tuple[RGB, ...] = (
    (255, 0, 0),  # red
    (255, 255, 0),  # yellow
    (0, 0, 255),  # blue
    (0, 0, 0),  # black
)

PALETTES: dict[ColorMode, tuple[RGB, ...]] = {
    ColorMode.CMYK: CMYK_PALETTE,
    ColorMode.RYBK: RYBK_PALETTE,
}


def parse_color_mode(value: str | ColorMode) -> ColorMode:
    """Coerce a color mode name, raising InvalidParameter for unknown ones."""
    try:
        return ColorMode(value)
    except ValueError as e:
        raise InvalidParameter(f"Unknown color mode: {value!r}") from e


def palette_for(mode: ColorMode) -> tuple[RGB, ...]:
    """Return the fixed palette for a color mode.

    Raises:
        KeyError: for monochrome, which has no palette.
    """
    return PALETTES[ColorMode(mode)]


def nearest_color(r: int, g: int, b: int, palette: tuple[RGB, ...]) -> RGB:
    """Map an RGB color to the nearest palette entry by squared distance.

    The first entry wins a tie.
    """
    best = palette[0]
    best_dist = None
    for color in palette:
        dr = int(r) - color[0]
        dg = int(g) - color[1]
        db = int(b) - color[2]
        dist = dr * dr + dg * dg + db * db
        if best_dist is None or dist < best_dist:
            best_dist = dist
            best = color
    return best


def quantize(rgb: np.ndarray, palette: tuple[RGB, ...]) -> np.ndarray:
    """Vectorized nearest_color over an (..., 3) array.

    Returns a uint8 array of the same shape holding palette colors.
    """
    colors = np.asarray(palette, dtype=np.int64)
    flat = rgb[..., :3].reshape(-1, 1, 3).astype(np.int64)
    dist = ((flat - colors[np.newaxis, :, :]) ** 2).sum(axis=2)
    # argmin picks the first minimum, same tie rule as nearest_color
    idx = dist.argmin(axis=1)
    return colors[idx].astype(np.uint8).reshape(rgb[..., :3].shape)


def rgb_string(color: RGB) -> str:
    """Format as a CSS ``rgb(r,g,b)`` string."""
    return f"rgb({color[0]},{color[1]},{color[2]})"


def mean_brightness(r: int, g: int, b: int) -> float:
    """Unweighted channel mean normalized to [0, 1]."""
    return (int(r) + int(g) + int(b)) / (3 * 255)


def dot_color(r: int, g: int, b: int, mode: ColorMode) -> str:
    """Fill color of a dot sampled from (r, g, b)."""
    if mode == ColorMode.MONOCHROME:
        return "black"
    return rgb_string(nearest_color(r, g, b, palette_for(mode)))


def gated_rgb(
    r: int,
    g: int,
    b: int,
    palette: tuple[RGB, ...] | None,
    black_threshold: float,
    white_threshold: float,
) -> RGB:
    """Quantize with the black/white brightness gate applied first.

    Brightness at or below black_threshold forces black, at or above
    white_threshold forces white; only the open interval between them is
    quantized. A ``None`` palette means monochrome (always black).
    """
    brightness = mean_brightness(r, g, b)
    if brightness <= black_threshold:
        return (0, 0, 0)
    if brightness >= white_threshold:
        return (255, 255, 255)
    if palette is None:
        return (0, 0, 0)
    return nearest_color(r, g, b, palette)
