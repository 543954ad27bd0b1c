"""Pan and zoom state of the canvas."""

from __future__ import annotations

import random
from typing import Callable, Iterable

from ideaboard.canvas.geometry import (
    ORIGIN,
    Point,
    Rect,
    bounding_rect,
    canvas_to_screen,
    clamp_zoom,
    distance,
    midpoint,
    screen_to_canvas,
    zoom_about,
)
from ideaboard.core.config import CanvasConfig


class Viewport:
    """Zoom factor, pan offset and size of the visible canvas area.

    Every mutation goes through `_commit`, which notifies `on_change` once
    when zoom or pan actually changed.
    """

    def __init__(
        self,
        config: CanvasConfig,
        on_change: Callable[[Viewport], None] | None = None,
    ) -> None:
        self.config = config
        self.on_change = on_change
        self.zoom: float = 1.0
        self.pan: Point = ORIGIN
        self.width: float = 0.0
        self.height: float = 0.0

    def to_canvas(self, point: Point) -> Point:
        return screen_to_canvas(point, self.pan, self.zoom)

    def to_screen(self, point: Point) -> Point:
        return canvas_to_screen(point, self.pan, self.zoom)

    def set_size(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def visible_center(self) -> Point:
        """Screen centre of the area not covered by the sidebar."""
        inset = min(self.config.viewport_left_inset, self.width)
        return Point(inset + (self.width - inset) / 2, self.height / 2)

    def _commit(self, zoom: float, pan: Point) -> None:
        changed = zoom != self.zoom or pan != self.pan
        self.zoom = zoom
        self.pan = pan
        if changed and self.on_change:
            self.on_change(self)

    def set_zoom(self, zoom: float, pivot: Point | None = None) -> None:
        """Zoom to an absolute factor keeping `pivot` (default: visible centre) fixed."""
        if pivot is None:
            pivot = self.visible_center()
        new_zoom = clamp_zoom(zoom, self.config.min_zoom, self.config.max_zoom)
        self._commit(new_zoom, zoom_about(pivot, self.pan, self.zoom, new_zoom))

    def zoom_by(self, factor: float, pivot: Point | None = None) -> None:
        self.set_zoom(self.zoom * factor, pivot)

    def wheel(self, point: Point, delta_y: float) -> None:
        """Discrete wheel zoom around the cursor. Scrolling up zooms in."""
        if delta_y == 0:
            return
        if delta_y > 0:
            factor = self.config.wheel_zoom_out
        else:
            factor = self.config.wheel_zoom_in
        self.zoom_by(factor, point)

    def zoom_in(self) -> None:
        self.zoom_by(self.config.button_zoom_in)

    def zoom_out(self) -> None:
        self.zoom_by(self.config.button_zoom_out)

    def pinch(
        self, prev_a: Point, prev_b: Point, cur_a: Point, cur_b: Point
    ) -> None:
        """Apply one frame of a two-finger gesture.

        The pan follows the movement of the touch midpoint, then the zoom
        changes by the ratio of the finger distances around the new midpoint,
        so the canvas point between the fingers stays between them.
        """
        prev_mid = midpoint(prev_a, prev_b)
        cur_mid = midpoint(cur_a, cur_b)
        pan = self.pan + (cur_mid - prev_mid)
        zoom = self.zoom

        prev_distance = distance(prev_a, prev_b)
        if prev_distance > 0:
            new_zoom = clamp_zoom(
                zoom * distance(cur_a, cur_b) / prev_distance,
                self.config.min_zoom,
                self.config.max_zoom,
            )
            pan = zoom_about(cur_mid, pan, zoom, new_zoom)
            zoom = new_zoom
        self._commit(zoom, pan)

    def pan_by(self, delta: Point) -> None:
        self._commit(self.zoom, self.pan + delta)

    def set_pan(self, pan: Point) -> None:
        self._commit(self.zoom, pan)

    def reset(self) -> None:
        self._commit(1.0, ORIGIN)

    def center_on(self, boxes: Iterable[Rect]) -> None:
        """Pan so the given canvas boxes are centred in the visible area.

        With nothing to show the canvas origin is centred instead.
        """
        target = self.visible_center()
        bounds = bounding_rect(boxes)
        focus = bounds.center if bounds else ORIGIN
        self._commit(self.zoom, target - focus * self.zoom)

    def spawn_position(self, rng: random.Random | None = None) -> Point:
        """Canvas position for a new card: the visible centre plus some jitter."""
        rng = rng or random
        center = self.to_canvas(self.visible_center())
        jitter = self.config.spawn_jitter
        return Point(
            center.x + rng.uniform(-jitter, jitter),
            center.y + rng.uniform(-jitter, jitter),
        )
