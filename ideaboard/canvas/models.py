"""Data the canvas engine reads from and writes to its backend."""

from __future__ import annotations

from dataclasses import dataclass, field

from ideaboard.canvas.geometry import Point


@dataclass
class CanvasCard:
    """An idea as seen by the canvas: identity, position and display hints."""

    id: str
    title: str
    x: float = 0.0
    y: float = 0.0
    group_id: str | None = None
    priority: str = 'medium'
    completed: bool = False

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def move_to(self, position: Point) -> None:
        self.x = position.x
        self.y = position.y


@dataclass(frozen=True)
class CardGroup:
    id: str
    name: str
    color: str


@dataclass
class BoardSnapshot:
    cards: list[CanvasCard] = field(default_factory=list)
    groups: list[CardGroup] = field(default_factory=list)


@dataclass(frozen=True)
class PositionUpdate:
    id: str
    x: float
    y: float


@dataclass(frozen=True)
class Modifiers:
    """Keyboard modifiers held during a pointer event."""

    shift: bool = False
    ctrl: bool = False
    meta: bool = False
    alt: bool = False

    @property
    def additive(self) -> bool:
        """Ctrl/Cmd extend the selection instead of replacing it."""
        return self.ctrl or self.meta

    @property
    def selecting(self) -> bool:
        """Any of these turns a press on empty canvas into a rectangle select."""
        return self.shift or self.ctrl or self.meta


NO_MODIFIERS = Modifiers()
