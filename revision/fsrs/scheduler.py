"""
Scheduler - Memory Model Transition

Pure scheduling logic (no database calls).

advance() maps (state, rating, review time, retention target) to a new
state and a due timestamp. It is deterministic: identical inputs always
give identical outputs, which is what makes replay-based undo and
recalculation valid.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime
from typing import Tuple

from revision.errors import ValidationError
from revision.fsrs import memory_state, memory_updates
from revision.fsrs.constants import (
    MAX_RETENTION,
    MIN_RETENTION,
    Rating,
    Stage,
)
from revision.fsrs.memory_state import MemoryState


def validate_retention_target(value: float) -> float:
    """
    Check a retention target against [MIN_RETENTION, MAX_RETENTION].

    Returns:
        The value as a float

    Raises:
        ValidationError: If the value is not a number or out of range
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Retention target must be a number, got {value!r}")
    value = float(value)
    if not (MIN_RETENTION <= value <= MAX_RETENTION):
        raise ValidationError(
            f"Retention target must be between {MIN_RETENTION} and {MAX_RETENTION}, got {value}"
        )
    return value


def parse_rating(value) -> Rating:
    """
    Convert a wire value (1-4) into a Rating.

    Raises:
        ValidationError: If the value is not one of 1, 2, 3, 4
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            "Invalid rating. Must be 1 (Again), 2 (Hard), 3 (Good), or 4 (Easy)"
        )
    try:
        return Rating(value)
    except ValueError:
        raise ValidationError(
            "Invalid rating. Must be 1 (Again), 2 (Hard), 3 (Good), or 4 (Easy)"
        ) from None


def advance(
    state: MemoryState,
    rating: Rating,
    review_time: datetime,
    retention_target: float,
) -> Tuple[MemoryState, datetime]:
    """
    Apply one review to a memory state.

    Workflow:
    1. First review: initialize S and D from the rating, stage -> Learning
    2. Later reviews: compute R at review time, update S and D,
       stage -> Relearning on Again (lapse counted), Review otherwise
    3. Due = review time + interval at which R drops to the retention target

    Args:
        state: Current memory state (not modified)
        rating: Review rating
        review_time: When the review happened (>= state.last_review)
        retention_target: Desired retrievability at the due date

    Returns:
        Tuple of (new_state, due)

    Raises:
        ValidationError: On out-of-range retention or a review time before
            the state's last review
    """
    rating = parse_rating(rating)
    retention_target = validate_retention_target(retention_target)

    if state.last_review is not None and review_time < state.last_review:
        raise ValidationError(
            f"Review time {review_time.isoformat()} precedes last review "
            f"{state.last_review.isoformat()}"
        )

    if state.is_new:
        new_state = replace(
            state,
            stage=Stage.LEARNING,
            stability=memory_updates.initial_stability(rating),
            difficulty=memory_updates.initial_difficulty(rating),
            reps=state.reps + 1,
            last_review=review_time,
        )
    else:
        days = memory_state.elapsed_days(state.last_review, review_time)
        retrievability = memory_state.calculate_retrievability(state.stability, days)

        if rating == Rating.AGAIN:
            stability = memory_updates.update_stability_on_failure(
                state.stability, state.difficulty, retrievability
            )
            stage = Stage.RELEARNING
            lapses = state.lapses + 1
        else:
            stability = memory_updates.update_stability_on_success(
                state.stability, state.difficulty, retrievability, rating
            )
            stage = Stage.REVIEW
            lapses = state.lapses

        new_state = replace(
            state,
            stage=stage,
            stability=stability,
            difficulty=memory_updates.update_difficulty(state.difficulty, rating),
            reps=state.reps + 1,
            lapses=lapses,
            last_review=review_time,
        )

    due = memory_state.due_after(
        review_time, memory_state.next_interval(new_state.stability, retention_target)
    )
    return new_state, due


def preview(
    state: MemoryState,
    review_time: datetime,
    retention_target: float,
) -> dict[Rating, datetime]:
    """
    Due date for each possible rating, without committing any of them.
    """
    return {
        rating: advance(state, rating, review_time, retention_target)[1]
        for rating in Rating
    }
