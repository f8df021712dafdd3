"""
Card scheduler for selecting cards to review.

Due selection is recomputed from the store on every call; nothing is
cached between requests. The resulting list becomes the client's
session queue.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from pymongo import ASCENDING

from revision.card_repo import CardStore, due_before_filter
from revision.fsrs import DEFAULT_LOOKAHEAD, truncate_to_millis
from revision.schemas import Card


def utc_now() -> datetime:
    """Current time in UTC at store (millisecond) precision."""
    return truncate_to_millis(datetime.now(timezone.utc))


def get_due_cards(
    store: CardStore,
    now: Optional[datetime] = None,
    lookahead: timedelta = DEFAULT_LOOKAHEAD,
) -> list[Card]:
    """
    Get all cards with due <= now + lookahead.

    The lookahead keeps short-interval cards (minutes) inside an active
    session instead of letting them drop out until the next refresh.

    Args:
        store: Card store
        now: Reference time (defaults to current UTC time)
        lookahead: Extra window past now (default: 10 minutes)

    Returns:
        Cards sorted by due date (earliest first)
    """
    if now is None:
        now = utc_now()
    return store.find(
        due_before_filter(now + lookahead),
        sort=[("due", ASCENDING), ("_id", ASCENDING)],
    )
