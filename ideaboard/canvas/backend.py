"""Abstract collaborator the canvas engine loads from and persists to."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ideaboard.canvas.models import BoardSnapshot, PositionUpdate


class CanvasBackend(ABC):
    """Data/API layer behind the canvas.

    The default implementation talks to the board REST API
    (ideaboard.client.HttpBoardClient). Failures are raised as exceptions;
    the engine reports them and keeps its optimistic local state.
    """

    @abstractmethod
    async def fetch_board(self) -> BoardSnapshot:
        """Return all ideas and groups of the current user."""

    @abstractmethod
    async def update_idea_position(self, idea_id: str, x: float, y: float) -> None:
        """Persist the canvas position of one idea."""

    @abstractmethod
    async def update_idea_positions(self, updates: list[PositionUpdate]) -> None:
        """Persist the canvas positions of several ideas in one call."""
