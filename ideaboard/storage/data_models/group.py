"""Data models for idea groups and their todo sections."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Group:
    """A coloured container of ideas.

    Deleting a group unassigns its ideas instead of deleting them.
    """

    id: str
    user_id: str
    name: str
    color: str  # any CSS color string accepted by the API
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class TodoSection:
    """A titled section of a group's todo list."""

    id: str
    user_id: str
    group_id: str
    title: str
    position: int = 0  # Ordering within the group
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
