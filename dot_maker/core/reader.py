"""Image loading into RGBA pixel buffers.

Images are downscaled so the longest side fits MAX_SIZE, which keeps the
generators interactive.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from dot_maker.core.errors import EmptyBuffer

MAX_SIZE = 800

SUPPORTED_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tif", ".tiff")


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA image, one byte per channel."""

    width: int
    height: int
    data: np.ndarray  # uint8, shape (height, width, 4)

    @classmethod
    def from_bytes(cls, width: int, height: int, raw: bytes | bytearray | list[int]) -> PixelBuffer:
        """Build from a flat RGBA sequence (4 samples per pixel)."""
        flat = np.asarray(raw, dtype=np.uint8)
        if width <= 0 or height <= 0 or flat.size != width * height * 4:
            raise EmptyBuffer(
                f"Expected {max(width, 0) * max(height, 0) * 4} RGBA samples "
                f"for {width}x{height}, got {flat.size}"
            )
        return cls(width, height, flat.reshape(height, width, 4))

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        arr = np.array(img.convert("RGBA"), dtype=np.uint8)
        return cls(img.width, img.height, arr)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data)

    def validate(self) -> None:
        """Raise EmptyBuffer unless the buffer is non-empty and well-sized."""
        if self.width <= 0 or self.height <= 0:
            raise EmptyBuffer(f"Empty pixel buffer: {self.width}x{self.height}")
        if self.data.shape != (self.height, self.width, 4):
            raise EmptyBuffer(
                f"Buffer data shape {self.data.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )


def fit_size(width: int, height: int, max_size: int = MAX_SIZE) -> tuple[int, int]:
    """Scale (width, height) down so the longest side is at most max_size."""
    scale = min(1.0, max_size / max(width, height))
    return max(1, int(width * scale)), max(1, int(height * scale))


def load_image(path: str | Path, max_size: int = MAX_SIZE) -> PixelBuffer:
    """Open an image file as a downscaled RGBA PixelBuffer.

    Raises:
        FileNotFoundError: if the path does not exist.
        ValueError: if the file is not a supported or decodable image.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported format: {path.suffix}")

    try:
        with Image.open(path) as img:
            img = img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Cannot decode image {path}: {e}") from e

    size = fit_size(img.width, img.height, max_size)
    if size != img.size:
        img = img.resize(size, Image.Resampling.LANCZOS)
    return PixelBuffer.from_image(img)
