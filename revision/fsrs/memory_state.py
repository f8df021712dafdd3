"""
Memory State - Card Memory State and Retrievability

Defines the core memory state variables and derived quantities.

Key concepts:
- Stability (S): Days until retrievability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import math

from revision.fsrs.constants import (
    DECAY,
    FACTOR,
    INITIAL_DELAY,
    MIN_INTERVAL,
    Stage,
)

# Largest day count timedelta accepts (timedelta.max.days), minus headroom for the seconds rounding
MAX_TIMEDELTA_DAYS = timedelta.max.days - 1


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single card.

    Owned by exactly one card and never mutated; every review produces
    a new instance.
    """
    stage: Stage = Stage.NEW
    stability: float = 0.0      # S, in days (0 while New)
    difficulty: float = 0.0     # D, range 1-10 (0 while New)
    reps: int = 0               # Total number of reviews
    lapses: int = 0             # Number of Again ratings after learning
    last_review: Optional[datetime] = None

    @property
    def is_new(self) -> bool:
        return self.stage == Stage.NEW


def new_card_state() -> MemoryState:
    """Canonical empty state of a freshly created card."""
    return MemoryState()


def initial_due(created_at: datetime) -> datetime:
    """First due date of a card that has never been reviewed."""
    return created_at + INITIAL_DELAY


def truncate_to_millis(timestamp: datetime) -> datetime:
    """
    Drop sub-millisecond precision.

    BSON datetimes hold milliseconds, so every timestamp that enters the
    memory model is normalized first; replay over stored timestamps then
    sees exactly what the original review saw.
    """
    return timestamp.replace(microsecond=timestamp.microsecond // 1000 * 1000)


def elapsed_days(since: datetime, until: datetime) -> float:
    """Elapsed time between two timestamps in (fractional) days."""
    return (until - since).total_seconds() / 86400.0


def calculate_retrievability(stability: float, days_elapsed: float) -> float:
    """
    Calculate retrievability using the power forgetting curve.

    Formula: R = (1 + FACTOR * Δt / S) ^ DECAY

    Interpretation:
    - Immediately after review: R = 1.0
    - After S days: R = 0.9
    - As Δt grows without bound: R -> 0

    Args:
        stability: Current stability in days
        days_elapsed: Time since last review in days

    Returns:
        Retrievability between 0 and 1
    """
    if days_elapsed <= 0:
        return 1.0
    if stability <= 0:
        return 0.0
    return math.pow(1.0 + FACTOR * days_elapsed / stability, DECAY)


def next_interval(stability: float, retention_target: float) -> timedelta:
    """
    Interval after which projected retrievability equals the retention target.

    Formula: I = S / FACTOR * (r ^ (1 / DECAY) - 1)

    The result is rounded to whole seconds and never shorter than
    MIN_INTERVAL. There is no policy maximum; the day count only saturates
    at what a timedelta can hold.
    """
    days = stability / FACTOR * (math.pow(retention_target, 1.0 / DECAY) - 1.0)
    days = min(days, MAX_TIMEDELTA_DAYS)
    interval = timedelta(seconds=round(days * 86400.0))
    return max(MIN_INTERVAL, interval)


def due_after(review_time: datetime, interval: timedelta) -> datetime:
    """
    review_time + interval, saturated at the latest representable timestamp.

    Very stable cards can get intervals that run past year 9999; those are
    scheduled at the last millisecond a datetime (and BSON) can hold.
    """
    latest = datetime.max.replace(microsecond=999000, tzinfo=review_time.tzinfo)
    return review_time + min(interval, latest - review_time)
