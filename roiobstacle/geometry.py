"""Region-of-interest and planar geometry helpers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

Point = tuple[float, float]


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def fits_within(self, width: int, height: int) -> bool:
        """Whether the rectangle lies wholly inside an image of this size."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.width >= 0
            and self.height >= 0
            and self.right <= width
            and self.bottom <= height
        )


def fixed_center_roi(width: int, height: int, margin_x: float, margin_y: float) -> Rect:
    """Return the centred region left after trimming a margin fraction from each side."""
    if width < 0 or height < 0:
        raise ValueError("image dimensions must not be negative")
    mx = int(width * margin_x)
    my = int(height * margin_y)
    return Rect(mx, my, width - 2 * mx, height - 2 * my)


def roi_mask(width: int, height: int, roi: Rect) -> np.ndarray:
    """Return a uint8 mask of shape (height, width), 255 inside ``roi`` and 0 elsewhere."""
    if width < 0 or height < 0:
        raise ValueError("image dimensions must not be negative")
    if not roi.fits_within(width, height):
        raise ValueError(f"{roi} does not fit in a {width}x{height} image")
    mask = np.zeros((height, width), dtype=np.uint8)
    mask[roi.y:roi.bottom, roi.x:roi.right] = 255
    return mask


def _cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points: Iterable[Iterable[float]]) -> list[Point]:
    """Return the vertices of the convex hull, counter-clockwise, without collinear points."""
    pts = sorted({(float(x), float(y)) for x, y in points})
    if len(pts) < 3:
        return pts

    def half(seq: Iterable[Point]) -> list[Point]:
        chain: list[Point] = []
        for p in seq:
            while len(chain) >= 2 and _cross(chain[-2], chain[-1], p) <= 0:
                chain.pop()
            chain.append(p)
        return chain

    lower = half(pts)
    upper = half(reversed(pts))
    return lower[:-1] + upper[:-1]


def polygon_area(points: Iterable[Iterable[float]]) -> float:
    """Return the unsigned area of a simple polygon given by its vertices."""
    pts = [(float(x), float(y)) for x, y in points]
    if len(pts) < 3:
        return 0.0
    twice = sum(
        x0 * y1 - x1 * y0 for (x0, y0), (x1, y1) in zip(pts, pts[1:] + pts[:1])
    )
    return abs(twice) / 2.0