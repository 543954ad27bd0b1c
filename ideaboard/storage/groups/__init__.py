"""Groups storage module."""

from ideaboard.storage.groups.groups_store import GroupsStore
from ideaboard.storage.groups.file_groups_store import FileGroupsStore

__all__ = ['GroupsStore', 'FileGroupsStore']
