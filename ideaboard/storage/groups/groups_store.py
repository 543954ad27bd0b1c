"""Abstract base class for group and todo section storage."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ideaboard.storage.data_models.group import Group, TodoSection


class GroupsStore(ABC):
    """Storage for the groups of a single user and their todo sections.

    Todo sections belong to exactly one group and are removed with it. The
    ideas of a deleted group are not touched here; callers unassign them
    through the ideas store.
    """

    @abstractmethod
    async def load_groups(self) -> list[Group]:
        """Load all groups, newest first."""

    @abstractmethod
    async def get_group(self, group_id: str) -> Group | None:
        """Get a group by id."""

    @abstractmethod
    async def create_group(self, name: str, color: str) -> Group:
        """Create and persist a new group."""

    @abstractmethod
    async def update_group(self, group: Group) -> bool:
        """Replace a stored group.

        Returns True if the group was found and updated, False otherwise.
        """

    @abstractmethod
    async def delete_group(self, group_id: str) -> bool:
        """Delete a group and its todo sections.

        Returns True if the group was found and removed, False otherwise.
        """

    @abstractmethod
    async def list_sections(self, group_id: str) -> list[TodoSection]:
        """Todo sections of a group ordered by position."""

    @abstractmethod
    async def get_section(self, section_id: str) -> TodoSection | None:
        """Get a todo section by id."""

    @abstractmethod
    async def create_section(
        self, group_id: str, title: str, position: int | None = None
    ) -> TodoSection:
        """Create a todo section. Without a position it is appended."""

    @abstractmethod
    async def update_section(self, section: TodoSection) -> bool:
        """Replace a stored todo section."""

    @abstractmethod
    async def delete_section(self, section_id: str) -> bool:
        """Delete a todo section."""
