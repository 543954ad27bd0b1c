"""Debounced persistence of card positions.

The writer keeps one pending-write slot per card id. Scheduling a position for
a card that already has one replaces it, so only the latest position is ever
sent. A single quiet-period timer, restarted by every schedule, drains all
slots into one backend call when it fires. Drains run one at a time, so writes
for a card reach the backend in the order they were scheduled.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Iterable

from ideaboard.canvas.backend import CanvasBackend
from ideaboard.canvas.models import PositionUpdate
from ideaboard.core.logger import ideaboard_logger as logger

ErrorCallback = Callable[[list[str], Exception], None]


@dataclass
class PositionWriter:
    """Coalesces position updates into debounced, batched backend calls.

    Must be used from inside a running event loop.
    """

    backend: CanvasBackend
    delay: float = 0.15
    on_error: ErrorCallback | None = None
    _pending: dict[str, PositionUpdate] = field(init=False, default_factory=dict)
    _in_flight: set[str] = field(init=False, default_factory=set)
    _timer: asyncio.TimerHandle | None = field(init=False, default=None)
    _flush_tasks: set[asyncio.Task] = field(init=False, default_factory=set)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)
    # Bumped on every schedule; _scheduled_at maps card id -> generation of its last schedule
    _generation: int = field(init=False, default=0)
    _scheduled_at: dict[str, int] = field(init=False, default_factory=dict)

    def schedule(self, idea_id: str, x: float, y: float) -> None:
        self.schedule_many([PositionUpdate(idea_id, x, y)])

    def schedule_many(self, updates: Iterable[PositionUpdate]) -> None:
        """Fill (or replace) the pending slot of each card and restart the timer."""
        scheduled = False
        for update in updates:
            if not scheduled:
                self._generation += 1
            self._pending[update.id] = update
            self._scheduled_at[update.id] = self._generation
            scheduled = True
        if scheduled:
            self._restart_timer()

    def cancel(self, idea_id: str) -> bool:
        """Drop the pending write of a card. Returns False if there was none."""
        dropped = self._pending.pop(idea_id, None) is not None
        if not self._pending:
            self._cancel_timer()
        return dropped

    def pending(self) -> dict[str, PositionUpdate]:
        return dict(self._pending)

    def is_dirty(self, idea_id: str) -> bool:
        """True while a write for the card is pending or in flight."""
        return idea_id in self._pending or idea_id in self._in_flight

    def dirty_ids(self) -> set[str]:
        return set(self._pending) | self._in_flight

    @property
    def generation(self) -> int:
        """Increases with every schedule call; compare with `scheduled_since`."""
        return self._generation

    def scheduled_since(self, generation: int) -> set[str]:
        """Ids of cards scheduled after `generation` was read."""
        return {cid for cid, gen in self._scheduled_at.items() if gen > generation}

    def flush_soon(self) -> None:
        """Send pending writes now instead of waiting for the quiet period."""
        self._cancel_timer()
        if self._pending:
            self._spawn_flush()

    async def flush(self) -> None:
        self._cancel_timer()
        await self._flush_pending()

    async def drain(self) -> None:
        """Flush everything pending and wait for in-flight writes to finish."""
        await self.flush()
        while self._flush_tasks:
            await asyncio.gather(*list(self._flush_tasks), return_exceptions=True)

    def _restart_timer(self) -> None:
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        self._timer = loop.call_later(self.delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._spawn_flush()

    def _spawn_flush(self) -> None:
        task = asyncio.get_running_loop().create_task(self._flush_pending())
        self._flush_tasks.add(task)
        task.add_done_callback(self._flush_tasks.discard)

    async def _flush_pending(self) -> None:
        async with self._lock:
            if not self._pending:
                return
            batch = list(self._pending.values())
            self._pending.clear()
            ids = [u.id for u in batch]
            self._in_flight = set(ids)
            try:
                if len(batch) == 1:
                    update = batch[0]
                    await self.backend.update_idea_position(update.id, update.x, update.y)
                else:
                    await self.backend.update_idea_positions(batch)
                logger.debug(f'Persisted positions for {len(batch)} ideas')
            except Exception as e:
                # The local position is kept; the next move writes again
                logger.error(f'Failed to persist positions for {ids}: {e}')
                if self.on_error:
                    self.on_error(ids, e)
            finally:
                self._in_flight = set()
