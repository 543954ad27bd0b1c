from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from ideaboard import __version__
from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.server.routes.groups import app as groups_router
from ideaboard.server.routes.health import add_health_endpoints
from ideaboard.server.routes.ideas import app as ideas_router
from ideaboard.server.routes.todo_lists import app as todo_lists_router
from ideaboard.server.shared import config


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        f'IdeaBoard {__version__} starting with {config.file_store} file store '
        f'at {config.file_store_path}'
    )
    if config.session_api_keys:
        logger.info(f'Session API keys configured for {len(config.session_api_keys)} users')
    else:
        logger.info('No session API keys configured; running in single-user mode')
    yield
    logger.info('IdeaBoard shutting down')


app = FastAPI(
    title='IdeaBoard',
    description='Spatial idea board: ideas, groups and todo lists',
    version=__version__,
    lifespan=_lifespan,
)

app.include_router(ideas_router)
app.include_router(groups_router)
app.include_router(todo_lists_router)
add_health_endpoints(app)
