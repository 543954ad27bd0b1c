"""Automatic arrangement of cards on the canvas."""

from __future__ import annotations

from typing import Iterable

from ideaboard.canvas.geometry import Point, Rect, bounding_rect
from ideaboard.canvas.models import CanvasCard

PRIORITY_RANK = {'critical': 0, 'high': 1, 'medium': 2, 'low': 3}


def _sort_key(card: CanvasCard) -> tuple:
    # Open before done, then most urgent first
    return (
        card.completed,
        PRIORITY_RANK.get(card.priority, len(PRIORITY_RANK)),
        card.title.lower(),
        card.id,
    )


def organize(
    cards: Iterable[CanvasCard],
    group_order: Iterable[str],
    origin: Point,
    card_width: float,
    card_height: float,
    gap: float,
) -> dict[str, Point]:
    """Lay cards out in one column per group.

    Columns follow `group_order`; groups referenced by cards but missing from
    the order come next in first-seen order, ungrouped cards last. Empty
    columns are skipped.

    Returns:
        New canvas position (top-left corner) per card id.
    """
    columns: dict[str | None, list[CanvasCard]] = {gid: [] for gid in group_order}
    ungrouped: list[CanvasCard] = []
    for card in cards:
        if card.group_id is None:
            ungrouped.append(card)
        else:
            columns.setdefault(card.group_id, []).append(card)
    columns[None] = ungrouped

    positions: dict[str, Point] = {}
    column_index = 0
    for column in columns.values():
        if not column:
            continue
        x = origin.x + column_index * (card_width + gap)
        for row, card in enumerate(sorted(column, key=_sort_key)):
            positions[card.id] = Point(x, origin.y + row * (card_height + gap))
        column_index += 1
    return positions


def cards_bounds(
    cards: Iterable[CanvasCard], card_width: float, card_height: float
) -> Rect | None:
    """Canvas-space box covering all cards, or None when there are none."""
    return bounding_rect(
        Rect(card.x, card.y, card_width, card_height) for card in cards
    )
