"""Observer plumbing for the canvas engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from ideaboard.core.logger import ideaboard_logger as logger


class CanvasEventType(str, Enum):
    """Events emitted by the engine and the keys of their payloads."""

    VIEWPORT_CHANGED = 'viewport_changed'  # zoom, pan
    SELECTION_CHANGED = 'selection_changed'  # selection
    BOARD_CHANGED = 'board_changed'  # card_ids
    DRAG_STARTED = 'drag_started'  # card_id, card_ids
    DRAG_ENDED = 'drag_ended'  # card_id, positions
    CARD_CLICKED = 'card_clicked'  # card_id
    RECTANGLE_SELECTED = 'rectangle_selected'  # card_ids, rect
    POSITIONS_CHANGED = 'positions_changed'  # positions
    PERSIST_FAILED = 'persist_failed'  # card_ids, error


@dataclass(frozen=True)
class CanvasEvent:
    type: CanvasEventType
    payload: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[CanvasEvent], None]


class EventEmitter:
    def __init__(self) -> None:
        self._listeners: dict[CanvasEventType, list[Listener]] = {}

    def subscribe(
        self, event_type: CanvasEventType, callback: Listener
    ) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        listeners = self._listeners.setdefault(event_type, [])
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def emit(self, event_type: CanvasEventType, **payload: Any) -> None:
        event = CanvasEvent(type=event_type, payload=payload)
        for callback in list(self._listeners.get(event_type, [])):
            try:
                callback(event)
            except Exception as e:
                # A broken listener must not break input handling
                logger.error(f'Error in {event_type.value} listener: {e}')
