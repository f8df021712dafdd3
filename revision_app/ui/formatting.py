"""
Display helpers for dates and review history.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from revision.schemas import DEFAULT_TOPIC_COLOR, ReviewEvent, is_hex_color


HISTORY_LIMIT = 5  # Most recent reviews shown under a card


def format_relative_date(value: datetime, now: Optional[datetime] = None) -> str:
    """
    Human label for a timestamp relative to now.

    Examples: "today", "yesterday", "3 days ago", "tomorrow", "in 4 days",
    or a plain date ("Mar 5, 2026") a week or more away.
    """
    now = now or datetime.now(timezone.utc)
    delta = value - now
    days = abs(delta).days
    is_past = delta.total_seconds() < 0

    if days == 0:
        return "today"
    if is_past and days == 1:
        return "yesterday"
    if is_past and days < 7:
        return f"{days} days ago"
    if not is_past and days == 1:
        return "tomorrow"
    if not is_past and days < 7:
        return f"in {days} days"
    return f"{value:%b} {value.day}, {value.year}"


def badge_color(value: Optional[str]) -> str:
    """Stored topic color if it is a hex color, else the default."""
    return value if is_hex_color(value) else DEFAULT_TOPIC_COLOR


def recent_history(review_log: list[ReviewEvent], limit: int = HISTORY_LIMIT) -> list[ReviewEvent]:
    """Last `limit` reviews, newest first."""
    if limit <= 0:
        return []
    return list(reversed(review_log[-limit:]))
