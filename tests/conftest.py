import asyncio
import os

# Keep the server module from touching the home directory on import
os.environ.setdefault('IDEABOARD_FILE_STORE', 'memory')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ideaboard.canvas.backend import CanvasBackend  # noqa: E402
from ideaboard.canvas.models import BoardSnapshot, CanvasCard, PositionUpdate  # noqa: E402
from ideaboard.storage.memory import InMemoryFileStore  # noqa: E402


class RecordingBackend(CanvasBackend):
    """Backend double that records every write.

    `calls` holds ('single', [update]) or ('batch', [updates...]) in call
    order. Setting `error` makes writes raise it; clearing `gate` holds writes
    until it is set again, and clearing `fetch_gate` does the same for fetches.
    """

    def __init__(self, cards: list[CanvasCard] | None = None):
        self.snapshot = BoardSnapshot(cards=list(cards or []))
        self.calls: list[tuple[str, list[PositionUpdate]]] = []
        self.error: Exception | None = None
        self.gate = asyncio.Event()
        self.gate.set()
        self.fetch_gate = asyncio.Event()
        self.fetch_gate.set()

    async def fetch_board(self) -> BoardSnapshot:
        await self.fetch_gate.wait()
        return BoardSnapshot(
            cards=[CanvasCard(**vars(c)) for c in self.snapshot.cards],
            groups=list(self.snapshot.groups),
        )

    async def update_idea_position(self, idea_id: str, x: float, y: float) -> None:
        await self.gate.wait()
        if self.error:
            raise self.error
        self.calls.append(('single', [PositionUpdate(idea_id, x, y)]))

    async def update_idea_positions(self, updates: list[PositionUpdate]) -> None:
        await self.gate.wait()
        if self.error:
            raise self.error
        self.calls.append(('batch', list(updates)))

    @property
    def written(self) -> dict[str, tuple[float, float]]:
        """Last written position per idea."""
        result = {}
        for _, updates in self.calls:
            for u in updates:
                result[u.id] = (u.x, u.y)
        return result


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def file_store() -> InMemoryFileStore:
    return InMemoryFileStore()


@pytest.fixture
def app(file_store):
    from ideaboard.server.app import app as server_app
    from ideaboard.server.dependencies import get_server_file_store

    server_app.dependency_overrides[get_server_file_store] = lambda: file_store
    yield server_app
    server_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
