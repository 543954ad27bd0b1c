"""Gesture state of the canvas engine.

A gesture starts on pointer-down and ends on pointer-up or cancel. Only one
gesture is active at a time; its session object holds everything recorded at
its start.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ideaboard.canvas.geometry import Point, Rect


class InteractionState(str, Enum):
    IDLE = 'idle'
    PENDING = 'pending'  # pressed on a card, not yet past the drag threshold
    DRAGGING_SINGLE = 'dragging_single'
    DRAGGING_MULTI = 'dragging_multi'
    RECTANGLE_SELECTING = 'rectangle_selecting'
    PANNING = 'panning'
    PINCHING = 'pinching'

    @property
    def is_dragging(self) -> bool:
        return self in (InteractionState.DRAGGING_SINGLE, InteractionState.DRAGGING_MULTI)


def exceeds_threshold(start: Point, current: Point, threshold: float) -> bool:
    """True once the pointer moved more than `threshold` pixels along either axis."""
    return abs(current.x - start.x) > threshold or abs(current.y - start.y) > threshold


@dataclass
class DragSession:
    """A press on a card that may turn into a drag.

    `initial_positions` holds the canvas position of every card that moves
    with the primary card, the primary included.
    """

    card_id: str
    start: Point  # screen
    initial_positions: dict[str, Point]
    was_selected: bool
    additive: bool

    @property
    def card_ids(self) -> list[str]:
        return list(self.initial_positions)

    def positions_at(self, pointer: Point, zoom: float) -> dict[str, Point]:
        """Positions of all dragged cards for the pointer at `pointer`.

        The primary card moves by the pointer delta converted to canvas units;
        every other card moves by the same canvas delta.
        """
        primary_initial = self.initial_positions[self.card_id]
        primary_current = primary_initial + (pointer - self.start) / zoom
        delta = primary_current - primary_initial
        return {cid: pos + delta for cid, pos in self.initial_positions.items()}


@dataclass
class RectangleSelection:
    start: Point  # screen
    current: Point
    additive: bool

    @property
    def rect(self) -> Rect:
        return Rect.from_corners(self.start, self.current)


@dataclass
class PanSession:
    start: Point
    last: Point
    moved: bool = False


@dataclass
class TouchTracker:
    """Active touch points by touch id, in press order."""

    points: dict[int, Point] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.points)

    def pair(self) -> tuple[int, int] | None:
        ids = list(self.points)
        if len(ids) < 2:
            return None
        return ids[0], ids[1]
