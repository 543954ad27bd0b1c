"""Canvas interaction engine: pan/zoom, drag, selection and debounced persistence."""

from ideaboard.canvas.backend import CanvasBackend
from ideaboard.canvas.engine import CanvasEngine
from ideaboard.canvas.events import CanvasEvent, CanvasEventType
from ideaboard.canvas.geometry import Point, Rect
from ideaboard.canvas.interaction import InteractionState
from ideaboard.canvas.models import (
    BoardSnapshot,
    CanvasCard,
    CardGroup,
    Modifiers,
    PositionUpdate,
)
from ideaboard.canvas.persistence import PositionWriter
from ideaboard.canvas.viewport import Viewport

__all__ = [
    'BoardSnapshot',
    'CanvasBackend',
    'CanvasCard',
    'CanvasEngine',
    'CanvasEvent',
    'CanvasEventType',
    'CardGroup',
    'InteractionState',
    'Modifiers',
    'Point',
    'PositionUpdate',
    'PositionWriter',
    'Rect',
    'Viewport',
]
