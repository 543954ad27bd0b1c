from fastapi import Depends

from ideaboard.server import shared
from ideaboard.server.user_auth import get_user_id
from ideaboard.storage.files import FileStore
from ideaboard.storage.groups import FileGroupsStore, GroupsStore
from ideaboard.storage.ideas import FileIdeasStore, IdeasStore


def get_server_file_store() -> FileStore:
    return shared.file_store


async def get_ideas_store(
    user_id: str = Depends(get_user_id),
    file_store: FileStore = Depends(get_server_file_store),
) -> IdeasStore:
    """Get the ideas store for the current user."""
    return FileIdeasStore(file_store, user_id)


async def get_groups_store(
    user_id: str = Depends(get_user_id),
    file_store: FileStore = Depends(get_server_file_store),
) -> GroupsStore:
    """Get the groups store for the current user."""
    return FileGroupsStore(file_store, user_id)
