"""File-based implementation of GroupsStore."""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.storage.data_models.group import Group, TodoSection
from ideaboard.storage.files import FileStore
from ideaboard.storage.groups.groups_store import GroupsStore
from ideaboard.utils.async_utils import call_sync_from_async

_write_lock = threading.Lock()


def _parse_datetime(value: object) -> datetime:
    if value and isinstance(value, str):
        return datetime.fromisoformat(value)
    return datetime.now(timezone.utc)


@dataclass
class _GroupsDocument:
    groups: list[Group]
    sections: list[TodoSection]


@dataclass
class FileGroupsStore(GroupsStore):
    """File-based implementation of GroupsStore.

    Groups and todo sections of one user share a JSON document at
    users/{user_id}/groups.json.
    """

    file_store: FileStore
    user_id: str

    @property
    def path(self) -> str:
        return f'users/{self.user_id}/groups.json'

    def _load(self) -> _GroupsDocument:
        try:
            data = json.loads(self.file_store.read(self.path))
        except FileNotFoundError:
            return _GroupsDocument(groups=[], sections=[])
        except json.JSONDecodeError as e:
            logger.error(f'Error parsing groups file {self.path}: {e}')
            return _GroupsDocument(groups=[], sections=[])

        groups = []
        for item in data.get('groups', []):
            try:
                groups.append(self._dict_to_group(item))
            except (KeyError, ValueError) as e:
                logger.warning(f'Failed to parse group: {e}')
        sections = []
        for item in data.get('todo_sections', []):
            try:
                sections.append(self._dict_to_section(item))
            except (KeyError, ValueError) as e:
                logger.warning(f'Failed to parse todo section: {e}')
        return _GroupsDocument(groups=groups, sections=sections)

    def _save(self, doc: _GroupsDocument) -> None:
        data = {
            'groups': [self._group_to_dict(g) for g in doc.groups],
            'todo_sections': [self._section_to_dict(s) for s in doc.sections],
        }
        self.file_store.write(self.path, json.dumps(data, indent=2))

    def _mutate(self, fn: Callable[[_GroupsDocument], object]) -> object:
        with _write_lock:
            doc = self._load()
            result = fn(doc)
            self._save(doc)
            return result

    async def load_groups(self) -> list[Group]:
        doc = await call_sync_from_async(self._load)
        return sorted(doc.groups, key=lambda g: g.created_at, reverse=True)

    async def get_group(self, group_id: str) -> Group | None:
        for group in await self.load_groups():
            if group.id == group_id:
                return group
        return None

    async def create_group(self, name: str, color: str) -> Group:
        now = datetime.now(timezone.utc)
        group = Group(
            id=uuid.uuid4().hex,
            user_id=self.user_id,
            name=name,
            color=color,
            created_at=now,
            updated_at=now,
        )
        await call_sync_from_async(self._mutate, lambda doc: doc.groups.append(group))
        logger.info(f'Created group {group.id} for user {self.user_id}')
        return group

    async def update_group(self, group: Group) -> bool:
        def replace(doc: _GroupsDocument) -> bool:
            for i, existing in enumerate(doc.groups):
                if existing.id == group.id:
                    group.updated_at = datetime.now(timezone.utc)
                    doc.groups[i] = group
                    return True
            return False

        return await call_sync_from_async(self._mutate, replace)

    async def delete_group(self, group_id: str) -> bool:
        def remove(doc: _GroupsDocument) -> bool:
            original_count = len(doc.groups)
            doc.groups = [g for g in doc.groups if g.id != group_id]
            if len(doc.groups) == original_count:
                return False
            doc.sections = [s for s in doc.sections if s.group_id != group_id]
            return True

        deleted = await call_sync_from_async(self._mutate, remove)
        if deleted:
            logger.info(f'Deleted group {group_id} for user {self.user_id}')
        return deleted

    async def list_sections(self, group_id: str) -> list[TodoSection]:
        doc = await call_sync_from_async(self._load)
        sections = [s for s in doc.sections if s.group_id == group_id]
        sections.sort(key=lambda s: (s.position, s.created_at))
        return sections

    async def get_section(self, section_id: str) -> TodoSection | None:
        doc = await call_sync_from_async(self._load)
        for section in doc.sections:
            if section.id == section_id:
                return section
        return None

    async def create_section(
        self, group_id: str, title: str, position: int | None = None
    ) -> TodoSection:
        section = TodoSection(
            id=uuid.uuid4().hex,
            user_id=self.user_id,
            group_id=group_id,
            title=title,
        )

        def append(doc: _GroupsDocument) -> None:
            if position is None:
                siblings = [s.position for s in doc.sections if s.group_id == group_id]
                section.position = max(siblings, default=-1) + 1
            else:
                section.position = position
            doc.sections.append(section)

        await call_sync_from_async(self._mutate, append)
        logger.info(f'Created todo section {section.id} in group {group_id}')
        return section

    async def update_section(self, section: TodoSection) -> bool:
        def replace(doc: _GroupsDocument) -> bool:
            for i, existing in enumerate(doc.sections):
                if existing.id == section.id:
                    doc.sections[i] = section
                    return True
            return False

        return await call_sync_from_async(self._mutate, replace)

    async def delete_section(self, section_id: str) -> bool:
        def remove(doc: _GroupsDocument) -> bool:
            original_count = len(doc.sections)
            doc.sections = [s for s in doc.sections if s.id != section_id]
            return len(doc.sections) != original_count

        return await call_sync_from_async(self._mutate, remove)

    def _group_to_dict(self, group: Group) -> dict:
        return {
            'id': group.id,
            'user_id': group.user_id,
            'name': group.name,
            'color': group.color,
            'created_at': group.created_at.isoformat() if group.created_at else None,
            'updated_at': group.updated_at.isoformat() if group.updated_at else None,
        }

    def _dict_to_group(self, data: dict) -> Group:
        return Group(
            id=data['id'],
            user_id=data.get('user_id', self.user_id),
            name=data['name'],
            color=data['color'],
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )

    def _section_to_dict(self, section: TodoSection) -> dict:
        return {
            'id': section.id,
            'user_id': section.user_id,
            'group_id': section.group_id,
            'title': section.title,
            'position': section.position,
            'created_at': section.created_at.isoformat() if section.created_at else None,
        }

    def _dict_to_section(self, data: dict) -> TodoSection:
        return TodoSection(
            id=data['id'],
            user_id=data.get('user_id', self.user_id),
            group_id=data['group_id'],
            title=data['title'],
            position=data.get('position', 0),
            created_at=_parse_datetime(data.get('created_at')),
        )
