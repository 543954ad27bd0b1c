"""Data model for ideas placed on the canvas."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

PRIORITIES = ('low', 'medium', 'high', 'critical')
DEFAULT_PRIORITY = 'medium'


@dataclass
class Idea:
    """A single idea card.

    Ideas live on the infinite canvas at (canvas_x, canvas_y) and show up in
    the todo-list view of their group, if they have one.
    """

    id: str  # UUID hex
    user_id: str  # Owner of this idea (per-user storage)
    title: str
    description: str | None = None
    priority: str = DEFAULT_PRIORITY  # one of PRIORITIES
    group_id: str | None = None  # None means ungrouped
    canvas_x: float = 0.0
    canvas_y: float = 0.0
    completed: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
