"""
FSRS Constants and Parameters

All configurable parameters of the memory model in one place.
Weights follow the FSRS-4.5 default parameter set.
"""

from datetime import timedelta
from enum import Enum, IntEnum


# ---- Ratings ----

class Rating(IntEnum):
    """Reviewer's recall-quality grade."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently

    @property
    def label(self) -> str:
        """Display label, e.g. 'Again'."""
        return RATING_LABELS[self]


RATING_LABELS = {
    Rating.AGAIN: "Again",
    Rating.HARD: "Hard",
    Rating.GOOD: "Good",
    Rating.EASY: "Easy",
}


# ---- Lifecycle Stages ----

class Stage(str, Enum):
    """Lifecycle stage of a card's memory."""
    NEW = "New"
    LEARNING = "Learning"
    REVIEW = "Review"
    RELEARNING = "Relearning"


# ---- Retention Target ----

DEFAULT_RETENTION = 0.9
MIN_RETENTION = 0.70
MAX_RETENTION = 0.97


# ---- Scheduling ----

INITIAL_DELAY = timedelta(hours=24)     # New card -> first due
MIN_INTERVAL = timedelta(minutes=5)     # Floor for very unstable cards
DEFAULT_LOOKAHEAD = timedelta(minutes=10)


# ---- Forgetting Curve ----
# R(t, S) = (1 + FACTOR * t / S) ^ DECAY, chosen so that R(S, S) = 0.9

DECAY = -0.5
FACTOR = 19.0 / 81.0


# ---- Model Bounds ----

S_MIN = 0.01    # Minimum stability (days)
D_MIN = 1.0     # Minimum difficulty
D_MAX = 10.0    # Maximum difficulty


# ---- Weights ----

WEIGHTS = (
    0.4072,   # w0:  initial stability, Again
    1.1829,   # w1:  initial stability, Hard
    3.1262,   # w2:  initial stability, Good
    15.4722,  # w3:  initial stability, Easy
    7.2102,   # w4:  initial difficulty base
    0.5316,   # w5:  initial difficulty grade modifier
    1.0651,   # w6:  difficulty step per grade
    0.0234,   # w7:  mean reversion toward D0(Easy)
    1.616,    # w8:  recall stability base
    0.1544,   # w9:  recall stability saturation
    1.0824,   # w10: recall retrievability influence
    1.9813,   # w11: forget stability base
    0.0953,   # w12: forget difficulty influence
    0.2975,   # w13: forget stability influence
    2.2042,   # w14: forget retrievability influence
    0.2407,   # w15: hard penalty
    2.9466,   # w16: easy bonus
)
