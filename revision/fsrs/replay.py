"""
Replay - Rebuild Memory State from the Review Log

The review log is the source of truth. Undo and bulk recalculation both
rebuild a card's state by folding advance() over the log from the empty
state; advance() is never inverted.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, Protocol, Tuple

from revision.fsrs import memory_state
from revision.fsrs.constants import Rating
from revision.fsrs.memory_state import MemoryState
from revision.fsrs.scheduler import advance


class LoggedReview(Protocol):
    """Anything with a timestamp and a rating (e.g. schemas.ReviewEvent)."""
    timestamp: datetime
    rating: Rating


def replay(
    review_log: Iterable[LoggedReview],
    created_at: datetime,
    retention_target: float,
) -> Tuple[MemoryState, datetime]:
    """
    Reconstruct a card's memory state and due date.

    Args:
        review_log: Logged reviews (sorted by timestamp here; ties keep log order)
        created_at: Card creation time
        retention_target: Retention target to schedule under

    Returns:
        (state, due). For an empty log this is the pristine New state with
        due = created_at + 24h.
    """
    state = memory_state.new_card_state()
    due = memory_state.initial_due(created_at)

    for event in sorted(review_log, key=lambda e: e.timestamp):
        state, due = advance(state, event.rating, event.timestamp, retention_target)

    return state, due
