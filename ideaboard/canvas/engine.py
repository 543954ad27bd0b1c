"""The canvas interaction engine.

Owns the viewport, the selection and the active gesture, turns pointer, touch
and wheel input into card moves and selection changes, and hands position
changes to a debounced PositionWriter. All handlers are synchronous and must
be called from the thread running the event loop the writer uses.

Selection policy:
- pressing an already-selected card drags the whole selection;
- pressing an unselected card collapses the selection to it;
- ctrl/cmd-pressing a card adds it to the selection, and a ctrl/cmd click on a
  card that was already selected removes it;
- a plain click on empty canvas clears the selection.
"""

from __future__ import annotations

from typing import Callable, Iterable

from ideaboard.canvas.backend import CanvasBackend
from ideaboard.canvas.events import CanvasEventType, EventEmitter, Listener
from ideaboard.canvas.geometry import Point, Rect, snap_to_grid
from ideaboard.canvas.interaction import (
    DragSession,
    InteractionState,
    PanSession,
    RectangleSelection,
    TouchTracker,
    exceeds_threshold,
)
from ideaboard.canvas.layout import cards_bounds, organize
from ideaboard.canvas.models import (
    NO_MODIFIERS,
    BoardSnapshot,
    CanvasCard,
    CardGroup,
    Modifiers,
    PositionUpdate,
)
from ideaboard.canvas.persistence import PositionWriter
from ideaboard.canvas.viewport import Viewport
from ideaboard.core.config import CanvasConfig
from ideaboard.core.logger import ideaboard_logger as logger

PRIMARY_BUTTON = 0
MIDDLE_BUTTON = 1

ARROW_KEYS = {
    'ArrowLeft': (-1, 0),
    'ArrowRight': (1, 0),
    'ArrowUp': (0, -1),
    'ArrowDown': (0, 1),
}
SHIFT_NUDGE_MULTIPLIER = 5


class CanvasEngine:
    def __init__(
        self,
        backend: CanvasBackend,
        config: CanvasConfig | None = None,
        writer: PositionWriter | None = None,
    ) -> None:
        self.config = config or CanvasConfig()
        self.backend = backend
        self.events = EventEmitter()
        self.viewport = Viewport(self.config, on_change=self._on_viewport_change)
        self.writer = writer or PositionWriter(
            backend,
            delay=self.config.persist_debounce,
            on_error=self._on_persist_error,
        )
        self._cards: dict[str, CanvasCard] = {}
        self._groups: dict[str, CardGroup] = {}
        self._selection: set[str] = set()
        self._state = InteractionState.IDLE
        self._drag: DragSession | None = None
        self._rect: RectangleSelection | None = None
        self._pan: PanSession | None = None
        self._touches = TouchTracker()

    # Observable state

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._selection)

    @property
    def cards(self) -> list[CanvasCard]:
        return list(self._cards.values())

    @property
    def groups(self) -> list[CardGroup]:
        return list(self._groups.values())

    @property
    def selection_rect(self) -> Rect | None:
        """Screen rectangle of an ongoing rectangle selection."""
        return self._rect.rect if self._rect else None

    def get_card(self, card_id: str) -> CanvasCard | None:
        return self._cards.get(card_id)

    def subscribe(
        self, event_type: CanvasEventType, callback: Listener
    ) -> Callable[[], None]:
        return self.events.subscribe(event_type, callback)

    # Board data

    async def refresh(self) -> None:
        """Reload the board from the backend.

        Cards that had a write pending or in flight when the fetch started, or
        that were moved while it was outstanding, keep their local position:
        the snapshot may predate those writes.
        """
        dirty = self.writer.dirty_ids()
        generation = self.writer.generation
        snapshot = await self.backend.fetch_board()
        self.set_board(snapshot, keep_local=dirty | self.writer.scheduled_since(generation))

    def set_board(self, snapshot: BoardSnapshot, keep_local: Iterable[str] = ()) -> None:
        """Replace the cards and groups.

        Cards with a write pending or in flight, cards being dragged and cards
        in `keep_local` keep their local position: the optimistic state is
        newer than the snapshot.
        """
        keep = set(self._drag.card_ids) if self._drag else set()
        keep.update(keep_local)
        cards: dict[str, CanvasCard] = {}
        for card in snapshot.cards:
            local = self._cards.get(card.id)
            if local and (card.id in keep or self.writer.is_dirty(card.id)):
                card.move_to(local.position)
            cards[card.id] = card
        self._cards = cards
        self._groups = {g.id: g for g in snapshot.groups}
        logger.debug(f'Loaded {len(cards)} cards and {len(self._groups)} groups')
        self.events.emit(CanvasEventType.BOARD_CHANGED, card_ids=list(cards))
        self._set_selection(self._selection & cards.keys())

    def upsert_card(self, card: CanvasCard) -> None:
        local = self._cards.get(card.id)
        if local and (self._is_dragged(card.id) or self.writer.is_dirty(card.id)):
            card.move_to(local.position)
        self._cards[card.id] = card
        self.events.emit(CanvasEventType.BOARD_CHANGED, card_ids=[card.id])

    def remove_card(self, card_id: str) -> None:
        if self._cards.pop(card_id, None) is None:
            return
        self.writer.cancel(card_id)
        if self._is_dragged(card_id):
            del self._drag.initial_positions[card_id]
            if card_id == self._drag.card_id:
                # The drag followed the removed card; put the others back
                self.pointer_cancel()
        self.events.emit(CanvasEventType.BOARD_CHANGED, card_ids=[card_id])
        if card_id in self._selection:
            self._set_selection(self._selection - {card_id})

    # Rendering helpers

    def card_rect(self, card_id: str) -> Rect:
        """Screen-space box of a card at the current pan and zoom."""
        card = self._cards[card_id]
        top_left = self.viewport.to_screen(card.position)
        zoom = self.viewport.zoom
        return Rect(
            top_left.x,
            top_left.y,
            self.config.card_width * zoom,
            self.config.card_height * zoom,
        )

    def screen_position(self, card_id: str) -> Point:
        return self.viewport.to_screen(self._cards[card_id].position)

    def render_positions(self) -> dict[str, Point]:
        return {cid: self.viewport.to_screen(c.position) for cid, c in self._cards.items()}

    def card_at(self, point: Point) -> str | None:
        """Topmost card under a screen point. Later cards are drawn on top."""
        for card_id in reversed(list(self._cards)):
            if self.card_rect(card_id).contains(point):
                return card_id
        return None

    def cards_in_rect(self, rect: Rect) -> list[str]:
        """Cards whose screen box overlaps `rect`, partially or fully."""
        return [cid for cid in self._cards if self.card_rect(cid).overlaps(rect)]

    def fit_to_cards(self) -> None:
        """Centre the visible area on all cards (or on the origin if there are none)."""
        bounds = cards_bounds(
            self._cards.values(), self.config.card_width, self.config.card_height
        )
        self.viewport.center_on([bounds] if bounds else [])

    def spawn_position(self) -> Point:
        return self.viewport.spawn_position()

    # Selection

    def select(self, card_ids: Iterable[str], additive: bool = False) -> None:
        ids = {cid for cid in card_ids if cid in self._cards}
        self._set_selection(self._selection | ids if additive else ids)

    def select_all(self) -> None:
        self._set_selection(set(self._cards))

    def clear_selection(self) -> None:
        self._set_selection(set())

    def _set_selection(self, selection: set[str]) -> None:
        if selection == self._selection:
            return
        self._selection = set(selection)
        self.events.emit(CanvasEventType.SELECTION_CHANGED, selection=self.selection)

    # Pointer input

    def pointer_down(
        self,
        point: Point,
        button: int = PRIMARY_BUTTON,
        modifiers: Modifiers = NO_MODIFIERS,
        target_id: str | None = None,
    ) -> None:
        """Start a gesture.

        `target_id` is the card the UI saw under the pointer; without it the
        engine hit-tests the cards itself.
        """
        if self._state != InteractionState.IDLE:
            return

        if button == MIDDLE_BUTTON:
            self._start_pan(point)
            return
        if button != PRIMARY_BUTTON:
            return

        if target_id is None:
            target_id = self.card_at(point)
        elif target_id not in self._cards:
            logger.debug(f'Ignoring pointer down on unknown card {target_id}')
            return

        if target_id is not None:
            self._start_press(point, target_id, modifiers)
        elif modifiers.selecting:
            self._rect = RectangleSelection(start=point, current=point, additive=modifiers.additive)
            self._state = InteractionState.RECTANGLE_SELECTING
        else:
            self._start_pan(point)

    def pointer_move(self, point: Point) -> None:
        state = self._state
        if state == InteractionState.PENDING:
            assert self._drag is not None
            if not exceeds_threshold(self._drag.start, point, self.config.drag_threshold):
                return
            self._begin_drag()
            self._drag_to(point)
        elif state.is_dragging:
            self._drag_to(point)
        elif state == InteractionState.RECTANGLE_SELECTING:
            assert self._rect is not None
            self._rect.current = point
        elif state == InteractionState.PANNING:
            assert self._pan is not None
            self.viewport.pan_by(point - self._pan.last)
            self._pan.last = point
            if exceeds_threshold(self._pan.start, point, self.config.drag_threshold):
                self._pan.moved = True

    def pointer_up(self, point: Point) -> None:
        state = self._state
        if state == InteractionState.PENDING:
            self._finish_click()
        elif state.is_dragging:
            self._finish_drag(point)
        elif state == InteractionState.RECTANGLE_SELECTING:
            self._finish_rectangle(point)
        elif state == InteractionState.PANNING:
            self._finish_pan(point)
        self._reset_gesture()

    def pointer_cancel(self) -> None:
        """Abort the current gesture. A drag puts its cards back where it started."""
        if self._state.is_dragging:
            assert self._drag is not None
            initial = self._drag.initial_positions
            self._apply_positions(initial)
            # Supersedes anything the drag scheduled
            self.writer.schedule_many(PositionUpdate(cid, p.x, p.y) for cid, p in initial.items())
        self._reset_gesture()

    def key_escape(self) -> None:
        self.pointer_cancel()
        self.clear_selection()

    def wheel(self, point: Point, delta_y: float) -> None:
        if self._state.is_dragging or self._state == InteractionState.RECTANGLE_SELECTING:
            return
        self.viewport.wheel(point, delta_y)

    # Touch input

    def touch_start(self, touch_id: int, point: Point) -> None:
        self._touches.points[touch_id] = point
        count = len(self._touches)
        if count == 1:
            self.pointer_down(point)
        elif count == 2:
            # A second finger turns any single-touch gesture into a pinch
            self.pointer_cancel()
            self._state = InteractionState.PINCHING

    def touch_move(self, touch_id: int, point: Point) -> None:
        if touch_id not in self._touches.points:
            return
        if self._state == InteractionState.PINCHING:
            pair = self._touches.pair()
            previous = dict(self._touches.points)
            self._touches.points[touch_id] = point
            if pair and touch_id in pair:
                a, b = pair
                self.viewport.pinch(
                    previous[a], previous[b], self._touches.points[a], self._touches.points[b]
                )
            return
        self._touches.points[touch_id] = point
        if len(self._touches) == 1:
            self.pointer_move(point)

    def touch_end(self, touch_id: int, point: Point) -> None:
        if self._touches.points.pop(touch_id, None) is None:
            return
        if self._state == InteractionState.PINCHING:
            # Lifting one finger ends the pinch; the remaining one does nothing
            if len(self._touches) < 2:
                self._reset_gesture()
            return
        if not self._touches.points:
            self.pointer_up(point)

    # Programmatic moves

    def nudge_selection(self, dx: float, dy: float) -> None:
        """Move the selected cards by (dx, dy) canvas units.

        Meant for key repeats: writes are debounced, never flushed early.
        """
        if not self._selection or self._state != InteractionState.IDLE:
            return
        delta = Point(dx, dy)
        positions = {cid: self._cards[cid].position + delta for cid in self._selection}
        self._apply_positions(positions)
        self._schedule(positions)

    def key_arrow(self, key: str, modifiers: Modifiers = NO_MODIFIERS) -> bool:
        """Nudge the selection for an arrow key. Returns False for any other key."""
        direction = ARROW_KEYS.get(key)
        if direction is None:
            return False
        step = self.config.nudge_step
        if modifiers.shift:
            step *= SHIFT_NUDGE_MULTIPLIER
        self.nudge_selection(direction[0] * step, direction[1] * step)
        return True

    def organize(self, origin: Point | None = None) -> dict[str, Point]:
        """Arrange all cards in one column per group and persist the result."""
        if origin is None:
            bounds = cards_bounds(
                self._cards.values(), self.config.card_width, self.config.card_height
            )
            origin = (
                snap_to_grid(Point(bounds.x, bounds.y), self.config.grid_size)
                if bounds
                else Point(0.0, 0.0)
            )
        positions = organize(
            self._cards.values(),
            list(self._groups),
            origin,
            self.config.card_width,
            self.config.card_height,
            self.config.organize_gap,
        )
        self._apply_positions(positions)
        self._schedule(positions)
        self.writer.flush_soon()
        logger.info(f'Organized {len(positions)} cards')
        return positions

    async def close(self) -> None:
        """Flush pending writes and wait for them."""
        await self.writer.drain()

    # Internals

    def _start_press(self, point: Point, card_id: str, modifiers: Modifiers) -> None:
        was_selected = card_id in self._selection
        if modifiers.additive:
            self._set_selection(self._selection | {card_id})
        elif not was_selected:
            self._set_selection({card_id})

        self._drag = DragSession(
            card_id=card_id,
            start=point,
            initial_positions={cid: self._cards[cid].position for cid in self._selection},
            was_selected=was_selected,
            additive=modifiers.additive,
        )
        self._state = InteractionState.PENDING

    def _is_dragged(self, card_id: str) -> bool:
        return self._drag is not None and card_id in self._drag.initial_positions

    def _start_pan(self, point: Point) -> None:
        self._pan = PanSession(start=point, last=point)
        self._state = InteractionState.PANNING

    def _begin_drag(self) -> None:
        assert self._drag is not None
        if len(self._drag.initial_positions) > 1:
            self._state = InteractionState.DRAGGING_MULTI
        else:
            self._state = InteractionState.DRAGGING_SINGLE
        self.events.emit(
            CanvasEventType.DRAG_STARTED,
            card_id=self._drag.card_id,
            card_ids=self._drag.card_ids,
        )

    def _drag_to(self, point: Point) -> dict[str, Point]:
        assert self._drag is not None
        positions = self._drag.positions_at(point, self.viewport.zoom)
        self._apply_positions(positions)
        self._schedule(positions)
        return positions

    def _finish_click(self) -> None:
        assert self._drag is not None
        card_id = self._drag.card_id
        if self._drag.additive:
            if self._drag.was_selected:
                self._set_selection(self._selection - {card_id})
        else:
            self._set_selection({card_id})
        self.events.emit(CanvasEventType.CARD_CLICKED, card_id=card_id)

    def _finish_drag(self, point: Point) -> None:
        assert self._drag is not None
        positions = self._drag_to(point)
        # Drag end never waits for the quiet period
        self.writer.flush_soon()
        self.events.emit(
            CanvasEventType.DRAG_ENDED,
            card_id=self._drag.card_id,
            positions=positions,
        )

    def _finish_rectangle(self, point: Point) -> None:
        assert self._rect is not None
        self._rect.current = point
        rect = self._rect.rect
        hits = self.cards_in_rect(rect)
        if self._rect.additive:
            self._set_selection(self._selection | set(hits))
        else:
            self._set_selection(set(hits))
        self.events.emit(CanvasEventType.RECTANGLE_SELECTED, card_ids=hits, rect=rect)

    def _finish_pan(self, point: Point) -> None:
        assert self._pan is not None
        self.viewport.pan_by(point - self._pan.last)
        if exceeds_threshold(self._pan.start, point, self.config.drag_threshold):
            self._pan.moved = True
        if not self._pan.moved:
            self.clear_selection()

    def _reset_gesture(self) -> None:
        self._drag = None
        self._rect = None
        self._pan = None
        self._state = InteractionState.IDLE

    def _apply_positions(self, positions: dict[str, Point]) -> None:
        for card_id, position in positions.items():
            card = self._cards.get(card_id)
            if card is not None:
                card.move_to(position)
        self.events.emit(CanvasEventType.POSITIONS_CHANGED, positions=dict(positions))

    def _schedule(self, positions: dict[str, Point]) -> None:
        self.writer.schedule_many(
            PositionUpdate(cid, p.x, p.y) for cid, p in positions.items() if cid in self._cards
        )

    def _on_viewport_change(self, viewport: Viewport) -> None:
        self.events.emit(CanvasEventType.VIEWPORT_CHANGED, zoom=viewport.zoom, pan=viewport.pan)

    def _on_persist_error(self, card_ids: list[str], error: Exception) -> None:
        self.events.emit(CanvasEventType.PERSIST_FAILED, card_ids=card_ids, error=error)
