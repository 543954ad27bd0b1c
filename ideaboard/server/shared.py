"""Process-wide server state: configuration and the backing file store."""

from ideaboard.core.config import load_ideaboard_config
from ideaboard.storage import get_file_store

config = load_ideaboard_config()

file_store = get_file_store(
    file_store_type=config.file_store,
    file_store_path=config.file_store_path,
)
