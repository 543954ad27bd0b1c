"""HTTP implementation of the canvas backend, talking to the board REST API."""

from __future__ import annotations

from typing import Any

import httpx

from ideaboard.canvas.backend import CanvasBackend
from ideaboard.canvas.models import BoardSnapshot, CanvasCard, CardGroup, PositionUpdate
from ideaboard.core.config import IdeaBoardConfig
from ideaboard.core.logger import ideaboard_logger as logger

SESSION_API_KEY_HEADER = 'X-Session-API-Key'


class BoardClientError(Exception):
    """A board API call failed, with the HTTP status when there was a response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _card_from_json(data: dict[str, Any]) -> CanvasCard:
    return CanvasCard(
        id=data['id'],
        title=data.get('title', ''),
        x=float(data.get('canvasX') or 0.0),
        y=float(data.get('canvasY') or 0.0),
        group_id=data.get('groupId'),
        priority=data.get('priority') or 'medium',
        completed=bool(data.get('completed', False)),
    )


def _group_from_json(data: dict[str, Any]) -> CardGroup:
    return CardGroup(id=data['id'], name=data['name'], color=data['color'])


class HttpBoardClient(CanvasBackend):
    """Async client for the board API.

    Args:
        base_url: Server root, e.g. http://127.0.0.1:3000
        session_api_key: Sent as X-Session-API-Key when the server requires one
        transport: Optional httpx transport (tests pass an ASGITransport)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        session_api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        headers = {}
        if session_api_key:
            headers[SESSION_API_KEY_HEADER] = session_api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    @classmethod
    def from_config(
        cls, config: IdeaBoardConfig, session_api_key: str | None = None
    ) -> HttpBoardClient:
        return cls(config.api_base_url, session_api_key=session_api_key)

    async def __aenter__(self) -> HttpBoardClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f'Board API {method} {url} failed: {e}')
            raise BoardClientError(f'{method} {url} failed: {e}') from e
        if response.is_error:
            raise BoardClientError(
                f'{method} {url} returned {response.status_code}: {response.text}',
                status_code=response.status_code,
            )
        return response

    async def fetch_board(self) -> BoardSnapshot:
        ideas = (await self._request('GET', '/api/ideas')).json()
        groups = (await self._request('GET', '/api/groups')).json()
        return BoardSnapshot(
            cards=[_card_from_json(i) for i in ideas],
            groups=[_group_from_json(g) for g in groups],
        )

    async def update_idea_position(self, idea_id: str, x: float, y: float) -> None:
        await self._request('PUT', f'/api/ideas/{idea_id}', json={'canvasX': x, 'canvasY': y})

    async def update_idea_positions(self, updates: list[PositionUpdate]) -> None:
        body = {'positions': [{'id': u.id, 'canvasX': u.x, 'canvasY': u.y} for u in updates]}
        response = await self._request('PATCH', '/api/ideas/positions', json=body)
        missing = response.json().get('missing', [])
        if missing:
            logger.warning(f'Server did not know ideas {missing}')

    async def create_idea(self, title: str, x: float, y: float, **fields: Any) -> CanvasCard:
        """Create an idea at a canvas position and return it as a card."""
        body = {'title': title, 'canvasX': x, 'canvasY': y, **fields}
        response = await self._request('POST', '/api/ideas', json=body)
        return _card_from_json(response.json())

    async def delete_idea(self, idea_id: str) -> None:
        await self._request('DELETE', f'/api/ideas/{idea_id}')
