"""Circle records shared by both generators and their consumers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Circle:
    """A filled dot. Color is any string Pillow and SVG both accept."""

    x: float
    y: float
    r: float
    color: str

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) bounding box."""
        return (self.x - self.r, self.y - self.r, self.x + self.r, self.y + self.r)


# Drawing order: later circles are painted over earlier ones
CircleList = list[Circle]
