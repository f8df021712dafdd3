"""
Memory Updates

Implements stability and difficulty updates for a single review.

Key principles:
- Surprising success (low R before review) produces the largest stability gains
- Failure sharply reduces stability
- Difficulty moves toward a rating-dependent target and reverts slightly
  toward the Easy baseline on every review
"""

from __future__ import annotations
import math

from revision.fsrs.constants import (
    Rating,
    S_MIN,
    D_MIN,
    D_MAX,
    WEIGHTS as W,
)


def _clamp_difficulty(difficulty: float) -> float:
    return max(D_MIN, min(D_MAX, difficulty))


def initial_stability(rating: Rating) -> float:
    """S0(G) = w[G-1]"""
    return max(S_MIN, W[rating - 1])


def initial_difficulty(rating: Rating) -> float:
    """D0(G) = w4 - exp(w5 * (G - 1)) + 1, clipped to [1, 10]"""
    return _clamp_difficulty(W[4] - math.exp(W[5] * (rating - 1)) + 1.0)


def update_difficulty(difficulty: float, rating: Rating) -> float:
    """
    Update difficulty based on the rating.

    Formula:
        D' = D - w6 * (G - 3)
        D_new = clip(w7 * D0(Easy) + (1 - w7) * D', 1, 10)

    Again/Hard push difficulty up, Easy pulls it down, and the mean
    reversion term drifts every card slightly toward the Easy baseline.
    """
    stepped = difficulty - W[6] * (rating - 3)
    reverted = W[7] * initial_difficulty(Rating.EASY) + (1.0 - W[7]) * stepped
    return _clamp_difficulty(reverted)


def update_stability_on_success(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating,
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S_new = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1) * HP * EB)

    Where:
        - (e^(w10 * (1 - R)) - 1) rewards surprising (well-spaced) success
        - (11 - D) reduces gains for difficult cards
        - HP = w15 for Hard, EB = w16 for Easy, 1 otherwise
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use update_stability_on_failure for AGAIN rating")

    hard_penalty = W[15] if rating == Rating.HARD else 1.0
    easy_bonus = W[16] if rating == Rating.EASY else 1.0

    gain = (
        math.exp(W[8])
        * (11.0 - difficulty)
        * math.pow(stability, -W[9])
        * (math.exp(W[10] * (1.0 - retrievability)) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    return max(S_MIN, stability * (1.0 + gain))


def update_stability_on_failure(
    stability: float,
    difficulty: float,
    retrievability: float,
) -> float:
    """
    Update stability after failed retrieval (Again).

    Formula:
        S_new = w11 * D^-w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))

    Never exceeds the pre-review stability.
    """
    forgotten = (
        W[11]
        * math.pow(difficulty, -W[12])
        * (math.pow(stability + 1.0, W[13]) - 1.0)
        * math.exp(W[14] * (1.0 - retrievability))
    )
    return max(S_MIN, min(forgotten, stability))
