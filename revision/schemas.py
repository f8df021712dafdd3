"""
Pydantic models for the revision scheduler.

These models define the shape of card documents and of the inputs
accepted by the card and settings services.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from revision.fsrs import (
    DEFAULT_RETENTION,
    MemoryState,
    Rating,
    validate_retention_target,
)


# Configuration
DEFAULT_TOPIC_COLOR = "#6366f1"
HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


def validation_message(exc: PydanticValidationError) -> str:
    """First violated constraint of a pydantic error, without pydantic's prefix."""
    error = exc.errors()[0]
    message = error["msg"].removeprefix("Value error, ")
    location = ".".join(str(part) for part in error.get("loc", ()))
    if location and location not in message.lower():
        return f"{location}: {message}"
    return message


def is_hex_color(value: Optional[str]) -> bool:
    return value is not None and HEX_COLOR.fullmatch(value) is not None


def _topic_color(value: Optional[str]) -> Optional[str]:
    """Blank means "no color given"; anything else must be #rgb or #rrggbb."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not is_hex_color(value):
        raise ValueError(f"Topic color must be a hex color like #6366f1, got {value!r}")
    return value


def _required_text(value: str, field_name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


# ---- Review Log ----

class ReviewEvent(BaseModel):
    """A single logged review. Immutable once appended."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    rating: Rating
    rating_text: str = Field(..., description="Display label of the rating, e.g. 'Good'")

    @classmethod
    def record(cls, rating: Rating, timestamp: datetime) -> ReviewEvent:
        return cls(timestamp=timestamp, rating=rating, rating_text=rating.label)


# ---- Card ----

class Card(BaseModel):
    """
    A learning item with its memory state and review log.

    One document per card in the `cards` collection.
    """
    id: str = Field(..., description="Hex ObjectId of the card document")
    topic: str
    topic_color: str = DEFAULT_TOPIC_COLOR
    title: str
    content: str = ""
    created_at: datetime

    # Scheduling
    memory: MemoryState = Field(default_factory=MemoryState)
    due: datetime
    last_reviewed: Optional[datetime] = None
    review_log: list[ReviewEvent] = Field(default_factory=list)

    # Optimistic concurrency stamp, incremented on every update
    version: int = 0

    @property
    def review_count(self) -> int:
        return len(self.review_log)


class CardCreate(BaseModel):
    """Input for creating a card."""
    topic: str
    title: str
    content: Optional[str] = ""
    topic_color: Optional[str] = None

    @field_validator("topic")
    @classmethod
    def _topic_required(cls, value: str) -> str:
        return _required_text(value, "Topic")

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        return _required_text(value, "Title")

    @field_validator("content")
    @classmethod
    def _strip(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None

    @field_validator("topic_color")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        return _topic_color(value)


class CardUpdate(BaseModel):
    """Input for editing card fields. Omitted fields are left unchanged."""
    topic: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    topic_color: Optional[str] = None

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _required_text(value, "Topic")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _required_text(value, "Title")

    @field_validator("content")
    @classmethod
    def _strip(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None

    @field_validator("topic_color")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        return _topic_color(value)

    def changes(self) -> dict:
        """Fields that were actually supplied."""
        return self.model_dump(exclude_none=True)


# ---- Settings ----

class SchedulerSettings(BaseModel):
    """Process-wide scheduling settings."""
    model_config = ConfigDict(frozen=True)

    retention_target: float = Field(
        default=DEFAULT_RETENTION,
        description="Desired recall probability at the due date (0.70-0.97)",
    )

    @field_validator("retention_target", mode="before")
    @classmethod
    def _check_range(cls, value):
        return validate_retention_target(value)


# ---- Results ----

class CardStats(BaseModel):
    """Dashboard counts."""
    total_cards: int
    due_cards: int
    reviewed_today: int


class RecalculationResult(BaseModel):
    """Outcome of replaying every reviewed card under the current settings."""
    updated: int
    total: int
