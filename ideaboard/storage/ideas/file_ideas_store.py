"""File-based storage for ideas."""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable

from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.storage.data_models.idea import Idea
from ideaboard.storage.files import FileStore
from ideaboard.storage.ideas.ideas_store import IdeasStore
from ideaboard.utils.async_utils import call_sync_from_async

DATETIME_FIELDS = ('created_at', 'updated_at')
UPDATABLE_FIELDS = frozenset(
    {'title', 'description', 'priority', 'group_id', 'canvas_x', 'canvas_y', 'completed'}
)

# Guards read-modify-write cycles on the ideas files of this process
_write_lock = threading.Lock()


def _idea_to_dict(idea: Idea) -> dict:
    """Convert an Idea to a dictionary for JSON serialization."""
    data = asdict(idea)
    for key in DATETIME_FIELDS:
        if data.get(key) and isinstance(data[key], datetime):
            data[key] = data[key].isoformat()
    return data


def _dict_to_idea(data: dict) -> Idea:
    """Convert a dictionary to an Idea."""
    for key in DATETIME_FIELDS:
        if data.get(key) and isinstance(data[key], str):
            data[key] = datetime.fromisoformat(data[key])
    return Idea(**data)


class FileIdeasStore(IdeasStore):
    """File-based storage for ideas.

    Ideas are stored per user in a single JSON file.
    Storage location: {file_store_path}/users/{user_id}/ideas.json
    """

    def __init__(self, file_store: FileStore, user_id: str):
        self.file_store = file_store
        self.user_id = user_id

    def _get_ideas_file_path(self) -> str:
        return f'users/{self.user_id}/ideas.json'

    def _load_ideas_file(self) -> list[Idea]:
        """Load the raw ideas data from file."""
        file_path = self._get_ideas_file_path()
        try:
            content = self.file_store.read(file_path)
            data = json.loads(content)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            logger.error(f'Error parsing ideas file {file_path}: {e}')
            return []

        ideas = []
        for item in data:
            try:
                ideas.append(_dict_to_idea(item))
            except (TypeError, ValueError) as e:
                logger.warning(f'Failed to parse idea in {file_path}: {e}')
        return ideas

    def _save_ideas_file(self, ideas: list[Idea]) -> None:
        file_path = self._get_ideas_file_path()
        content = json.dumps([_idea_to_dict(i) for i in ideas], indent=2)
        self.file_store.write(file_path, content)

    def _mutate(self, fn: Callable[[list[Idea]], object]) -> object:
        """Run fn over the loaded ideas and save them, atomically per process."""
        with _write_lock:
            ideas = self._load_ideas_file()
            result = fn(ideas)
            self._save_ideas_file(ideas)
            return result

    async def load_ideas(self) -> list[Idea]:
        ideas = await call_sync_from_async(self._load_ideas_file)
        ideas.sort(key=lambda x: x.created_at, reverse=True)
        return ideas

    async def get_idea(self, idea_id: str) -> Idea | None:
        ideas = await self.load_ideas()
        for idea in ideas:
            if idea.id == idea_id:
                return idea
        return None

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
        now = datetime.now(timezone.utc)
        idea = Idea(
            id=uuid.uuid4().hex,
            user_id=self.user_id,
            title=title,
            description=description,
            priority=priority,
            group_id=group_id,
            canvas_x=canvas_x,
            canvas_y=canvas_y,
            completed=completed,
            created_at=now,
            updated_at=now,
        )
        await call_sync_from_async(self._mutate, lambda ideas: ideas.append(idea))
        logger.info(f'Created idea {idea.id} for user {self.user_id}')
        return idea

    async def update_idea(self, idea: Idea) -> Idea:
        def replace(ideas: list[Idea]) -> bool:
            for i, existing in enumerate(ideas):
                if existing.id == idea.id:
                    idea.updated_at = datetime.now(timezone.utc)
                    ideas[i] = idea
                    return True
            return False

        if not await call_sync_from_async(self._mutate, replace):
            raise ValueError(f'Idea {idea.id} not found')
        logger.info(f'Updated idea {idea.id}')
        return idea

    async def update_fields(self, idea_id: str, **changes: Any) -> Idea | None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f'Cannot update idea fields: {sorted(unknown)}')

        def apply(ideas: list[Idea]) -> Idea | None:
            for idea in ideas:
                if idea.id == idea_id:
                    for name, value in changes.items():
                        setattr(idea, name, value)
                    idea.updated_at = datetime.now(timezone.utc)
                    return idea
            return None

        idea = await call_sync_from_async(self._mutate, apply)
        if idea:
            logger.info(f'Updated idea {idea_id}: {sorted(changes)}')
        return idea

    async def update_positions(
        self, positions: list[tuple[str, float, float]]
    ) -> tuple[list[Idea], list[str]]:
        def move(ideas: list[Idea]) -> tuple[list[Idea], list[str]]:
            idea_map = {idea.id: idea for idea in ideas}
            now = datetime.now(timezone.utc)
            updated: list[Idea] = []
            missing: list[str] = []
            for idea_id, x, y in positions:
                idea = idea_map.get(idea_id)
                if idea is None:
                    missing.append(idea_id)
                    continue
                idea.canvas_x = x
                idea.canvas_y = y
                idea.updated_at = now
                updated.append(idea)
            return updated, missing

        updated, missing = await call_sync_from_async(self._mutate, move)
        if missing:
            logger.warning(f'Position update skipped unknown ideas: {missing}')
        logger.info(f'Moved {len(updated)} ideas for user {self.user_id}')
        return updated, missing

    async def delete_idea(self, idea_id: str) -> bool:
        def remove(ideas: list[Idea]) -> bool:
            original_len = len(ideas)
            ideas[:] = [i for i in ideas if i.id != idea_id]
            return len(ideas) != original_len

        deleted = await call_sync_from_async(self._mutate, remove)
        if deleted:
            logger.info(f'Deleted idea {idea_id} for user {self.user_id}')
        return deleted

    async def get_ideas_by_group(self, group_id: str) -> list[Idea]:
        ideas = await self.load_ideas()
        return [i for i in ideas if i.group_id == group_id]

    async def get_unassigned_ideas(self) -> list[Idea]:
        ideas = await self.load_ideas()
        return [i for i in ideas if i.group_id is None]

    async def unassign_group(self, group_id: str) -> int:
        def detach(ideas: list[Idea]) -> int:
            now = datetime.now(timezone.utc)
            count = 0
            for idea in ideas:
                if idea.group_id == group_id:
                    idea.group_id = None
                    idea.updated_at = now
                    count += 1
            return count

        count = await call_sync_from_async(self._mutate, detach)
        logger.info(f'Unassigned {count} ideas from group {group_id}')
        return count
