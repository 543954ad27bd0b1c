"""Ideas storage module."""

from ideaboard.storage.ideas.ideas_store import IdeasStore
from ideaboard.storage.ideas.file_ideas_store import FileIdeasStore

__all__ = ['IdeasStore', 'FileIdeasStore']
