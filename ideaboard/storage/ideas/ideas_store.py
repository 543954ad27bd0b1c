"""Abstract base class for idea storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ideaboard.storage.data_models.idea import Idea


class IdeasStore(ABC):
    """Storage for the ideas of a single user.

    The default implementation keeps one JSON document per user
    (FileIdeasStore). Alternative backends implement the same methods.
    """

    @abstractmethod
    async def load_ideas(self) -> list[Idea]:
        """Load all ideas, newest first."""

    @abstractmethod
    async def get_idea(self, idea_id: str) -> Idea | None:
        """Get an idea by id."""

    @abstractmethod
    async def create_idea(
        self,
        title: str,
        description: str | None = None,
        priority: str = 'medium',
        group_id: str | None = None,
        canvas_x: float = 0.0,
        canvas_y: float = 0.0,
        completed: bool = False,
    ) -> Idea:
        """Create and persist a new idea."""

    @abstractmethod
    async def update_idea(self, idea: Idea) -> Idea:
        """Replace a stored idea. Raises ValueError if it does not exist."""

    @abstractmethod
    async def update_fields(self, idea_id: str, **changes: Any) -> Idea | None:
        """Apply `changes` to the stored idea in one read-modify-write.

        Only the given fields change, so concurrent updates of other fields
        are not lost. Returns None if the idea does not exist.
        """

    @abstractmethod
    async def update_positions(
        self, positions: list[tuple[str, float, float]]
    ) -> tuple[list[Idea], list[str]]:
        """Move several ideas in one write.

        Returns the updated ideas and the ids that were not found.
        """

    @abstractmethod
    async def delete_idea(self, idea_id: str) -> bool:
        """Delete an idea. Returns False if it was not found."""

    @abstractmethod
    async def get_ideas_by_group(self, group_id: str) -> list[Idea]:
        """Ideas assigned to a group."""

    @abstractmethod
    async def get_unassigned_ideas(self) -> list[Idea]:
        """Ideas without a group."""

    @abstractmethod
    async def unassign_group(self, group_id: str) -> int:
        """Detach all ideas from a group. Returns how many were changed."""
