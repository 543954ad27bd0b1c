from ideaboard.storage.files import FileStore
from ideaboard.storage.local import LocalFileStore
from ideaboard.storage.memory import InMemoryFileStore


def get_file_store(
    file_store_type: str,
    file_store_path: str | None = None,
) -> FileStore:
    if file_store_type == 'local':
        if file_store_path is None:
            raise ValueError('file_store_path is required for local file store')
        return LocalFileStore(file_store_path)
    if file_store_type == 'memory':
        return InMemoryFileStore()
    raise ValueError(f'Unknown file store type: {file_store_type}')


__all__ = ['FileStore', 'LocalFileStore', 'InMemoryFileStore', 'get_file_store']
