"""
FSRS - Free Spaced Repetition Scheduler

Pure memory model for the revision scheduler.

This package implements:
- Power forgetting curve: R = (1 + FACTOR * Δt / S) ^ DECAY
- Stability and difficulty updates per review
- Due dates tuned to a retention target
- Deterministic replay of a review log

Quick start:
    from revision import fsrs

    # Apply one review (no DB calls)
    state, due = fsrs.advance(state, fsrs.Rating.GOOD, now, 0.9)

    # Rebuild state from a card's log
    state, due = fsrs.replay(card.review_log, card.created_at, 0.9)
"""

# Core algorithm
from revision.fsrs.scheduler import (
    advance,
    preview,
    parse_rating,
    validate_retention_target,
)
from revision.fsrs.replay import replay

# Constants and parameters
from revision.fsrs.constants import (
    Rating,
    Stage,
    RATING_LABELS,
    DEFAULT_RETENTION,
    MIN_RETENTION,
    MAX_RETENTION,
    INITIAL_DELAY,
    MIN_INTERVAL,
    DEFAULT_LOOKAHEAD,
)

# Memory state
from revision.fsrs.memory_state import (
    MemoryState,
    new_card_state,
    initial_due,
    truncate_to_millis,
    calculate_retrievability,
    next_interval,
    due_after,
)


__all__ = [
    # Core algorithm
    "advance",
    "preview",
    "parse_rating",
    "validate_retention_target",
    "replay",

    # Enums
    "Rating",
    "Stage",
    "RATING_LABELS",

    # Memory state
    "MemoryState",
    "new_card_state",
    "initial_due",
    "truncate_to_millis",
    "calculate_retrievability",
    "next_interval",
    "due_after",

    # Parameters
    "DEFAULT_RETENTION",
    "MIN_RETENTION",
    "MAX_RETENTION",
    "INITIAL_DELAY",
    "MIN_INTERVAL",
    "DEFAULT_LOOKAHEAD",
]
