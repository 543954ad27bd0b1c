"""Screen/canvas coordinate math.

Screen space is the viewport in pixels. Canvas space is the logical plane ideas
are stored in. The two are related by the pan offset (screen pixels) and the
zoom factor:

    screen = canvas * zoom + pan
    canvas = (screen - pan) / zoom
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    def __truediv__(self, divisor: float) -> Point:
        return Point(self.x / divisor, self.y / divisor)

    def is_close(self, other: Point, tol: float = 1e-9) -> bool:
        return math.isclose(self.x, other.x, abs_tol=tol) and math.isclose(
            self.y, other.y, abs_tol=tol
        )


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box with its top-left corner at (x, y)."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, a: Point, b: Point) -> Rect:
        """Normalise two opposite corners, dragged in any direction."""
        return cls(
            x=min(a.x, b.x),
            y=min(a.y, b.y),
            width=abs(b.x - a.x),
            height=abs(b.y - a.y),
        )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, point: Point) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def overlaps(self, other: Rect) -> bool:
        return rects_overlap(self, other)


def screen_to_canvas(point: Point, pan: Point, zoom: float) -> Point:
    return (point - pan) / zoom


def canvas_to_screen(point: Point, pan: Point, zoom: float) -> Point:
    return point * zoom + pan


def clamp_zoom(zoom: float, min_zoom: float, max_zoom: float) -> float:
    return max(min_zoom, min(zoom, max_zoom))


def zoom_about(pivot: Point, pan: Point, old_zoom: float, new_zoom: float) -> Point:
    """Pan offset that keeps the canvas point under `pivot` fixed across a zoom change.

    The canvas point under the pivot is (pivot - pan) / old_zoom; solving
    pivot = canvas * new_zoom + new_pan for new_pan gives the result.
    """
    return pivot - (pivot - pan) * (new_zoom / old_zoom)


def rects_overlap(a: Rect, b: Rect) -> bool:
    """AABB overlap test. Touching edges count as overlapping."""
    return not (
        a.right < b.x or b.right < a.x or a.bottom < b.y or b.bottom < a.y
    )


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def snap_to_grid(point: Point, grid_size: float = 20) -> Point:
    return Point(
        round(point.x / grid_size) * grid_size,
        round(point.y / grid_size) * grid_size,
    )


def bounding_rect(rects: Iterable[Rect]) -> Rect | None:
    """Smallest rect covering all given rects, or None for an empty input."""
    rects = list(rects)
    if not rects:
        return None
    left = min(r.x for r in rects)
    top = min(r.y for r in rects)
    right = max(r.right for r in rects)
    bottom = max(r.bottom for r in rects)
    return Rect(left, top, right - left, bottom - top)
