"""Generation settings and mode dispatch.

PixelBuffer + Settings -> uniform grid or circle packing -> DotResult.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
import time
from dataclasses import dataclass
from enum import Enum

import numpy as np

from dot_maker.core.circles import CircleList
from dot_maker.core.errors import (
    InvalidParameter,
    check_grid_size,
    check_radii,
    check_thresholds,
    check_tone,
)
from dot_maker.core.grid import uniform_grid_halftone
from dot_maker.core.packing import circle_packing
from dot_maker.core.palette import ColorMode
from dot_maker.core.reader import PixelBuffer

logger = logging.getLogger(__name__)


class HalftoneMode(str, Enum):
    UNIFORM = "uniform"
    PACKING = "packing"


@dataclass(frozen=True)
class Settings:
    """Parameters that affect the generated circles."""

    mode: HalftoneMode = HalftoneMode.UNIFORM
    grid_size: int = 10  # 5 to 50 typical
    min_radius: float = 2
    max_radius: float = 20
    brightness: int = 0  # -100 to 100
    contrast: int = 0  # -100 to 100
    gamma: float = 1.0
    black_threshold: float = 0.05
    white_threshold: float = 0.85
    color_mode: ColorMode = ColorMode.MONOCHROME
    seed: int | None = None  # packing only; None draws fresh entropy

    def hash(self) -> str:
        """Deterministic hash for cache keying.

        Enum fields hash by value, so "packing" and HalftoneMode.PACKING agree.
        """
        mode = getattr(self.mode, "value", self.mode)
        color_mode = getattr(self.color_mode, "value", self.color_mode)
        data = (
            f"{mode}:{self.grid_size}:{self.min_radius}:{self.max_radius}:"
            f"{self.brightness}:{self.contrast}:{self.gamma}:"
            f"{self.black_threshold}:{self.white_threshold}:"
            f"{color_mode}:{self.seed}"
        )
        return hashlib.md5(data.encode()).hexdigest()[:12]

    def replace(self, **overrides) -> Settings:
        return dataclasses.replace(self, **overrides)

    def validate(self) -> None:
        """Raise InvalidParameter if any field is out of range."""
        try:
            HalftoneMode(self.mode)
            ColorMode(self.color_mode)
        except ValueError as e:
            raise InvalidParameter(str(e)) from e
        check_tone(self.brightness, self.contrast, self.gamma)
        check_thresholds(self.black_threshold, self.white_threshold)
        if self.mode == HalftoneMode.UNIFORM:
            check_grid_size(self.grid_size)
        else:
            check_radii(self.min_radius, self.max_radius)


@dataclass
class DotResult:
    """Circles generated for one image and the canvas they belong to."""

    circles: CircleList
    width: int
    height: int
    elapsed_ms: float = 0.0
    settings: Settings | None = None


def generate(buffer: PixelBuffer, settings: Settings) -> DotResult:
    """Run the generator selected by settings.mode over a pixel buffer."""
    buffer.validate()
    settings.validate()

    start = time.perf_counter()
    if settings.mode == HalftoneMode.UNIFORM:
        circles = uniform_grid_halftone(
            buffer,
            settings.grid_size,
            settings.brightness,
            settings.contrast,
            settings.gamma,
            settings.black_threshold,
            settings.white_threshold,
            settings.color_mode,
        )
    else:
        circles = circle_packing(
            buffer,
            settings.min_radius,
            settings.max_radius,
            settings.brightness,
            settings.contrast,
            settings.gamma,
            settings.black_threshold,
            settings.white_threshold,
            settings.color_mode,
            rng=np.random.default_rng(settings.seed),
        )
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.info(
        "Generated %d circles (%s) in %.0f ms",
        len(circles),
        HalftoneMode(settings.mode).value,
        elapsed_ms,
    )
    return DotResult(
        circles=circles,
        width=buffer.width,
        height=buffer.height,
        elapsed_ms=elapsed_ms,
        settings=settings,
    )
