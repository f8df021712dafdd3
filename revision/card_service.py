"""
Card lifecycle service: create, list, edit, delete and statistics.

Scheduling fields (memory, due, review log) are never touched here except
at creation; reviews go through ReviewService.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Optional

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo import DESCENDING

from revision import config
from revision.card_repo import CardStore, due_before_filter, to_object_id
from revision.errors import NotFoundError, ValidationError
from revision.fsrs import initial_due, new_card_state, truncate_to_millis
from revision.schemas import (
    DEFAULT_TOPIC_COLOR,
    Card,
    CardCreate,
    CardStats,
    CardUpdate,
    validation_message,
)
from revision.scheduler import get_due_cards, utc_now

logger = logging.getLogger(__name__)


def _parse(model, data: dict):
    try:
        return model(**data)
    except PydanticValidationError as exc:
        raise ValidationError(validation_message(exc)) from None


class CardService:
    """CRUD and dashboard counts over a card store."""

    def __init__(self, store: CardStore, review_timezone: Optional[tzinfo] = None):
        self.store = store
        self.review_timezone = review_timezone

    def create_card(
        self,
        topic: str,
        title: str,
        content: Optional[str] = "",
        topic_color: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Card:
        """
        Create a card with an empty review log.

        The card starts in the New stage and is first due 24 hours after
        creation.

        Raises:
            ValidationError: If topic or title is blank
        """
        data = _parse(CardCreate, {
            "topic": topic,
            "title": title,
            "content": content,
            "topic_color": topic_color,
        })
        created_at = truncate_to_millis(now) if now is not None else utc_now()

        card = Card(
            id=str(ObjectId()),
            topic=data.topic,
            topic_color=data.topic_color or DEFAULT_TOPIC_COLOR,
            title=data.title,
            content=data.content or "",
            created_at=created_at,
            memory=new_card_state(),
            due=initial_due(created_at),
        )
        self.store.insert(card)
        logger.info("Created card %s (%s / %s)", card.id, card.topic, card.title)
        return card

    def get_card(self, card_id: str) -> Card:
        """
        Raises:
            ValidationError: If card_id is malformed
            NotFoundError: If the card does not exist
        """
        card = self.store.find_one({"_id": to_object_id(card_id)})
        if card is None:
            raise NotFoundError("Card not found")
        return card

    def list_cards(self) -> list[Card]:
        """All cards, newest first."""
        return self.store.find({}, sort=[("created_at", DESCENDING)])

    def list_due_cards(self, now: Optional[datetime] = None, **kwargs) -> list[Card]:
        return get_due_cards(self.store, now=now, **kwargs)

    def update_card(self, card_id: str, **fields) -> Card:
        """
        Edit title, content, topic or topic color.

        Raises:
            ValidationError: Bad id, blank topic/title, or nothing to change
            NotFoundError: If the card does not exist
            ConflictError: If the card changed while being edited
        """
        oid = to_object_id(card_id)
        changes = _parse(CardUpdate, fields).changes()
        if not changes:
            raise ValidationError("No fields to update")

        card = self.store.find_one({"_id": oid})
        if card is None:
            raise NotFoundError("Card not found")
        return self.store.update_by_id(card.id, changes, expected_version=card.version)

    def delete_card(self, card_id: str) -> None:
        """
        Remove a card together with its review log.

        Raises:
            ValidationError: If card_id is malformed
            NotFoundError: If the card does not exist
        """
        to_object_id(card_id)
        if not self.store.delete_by_id(card_id):
            raise NotFoundError("Card not found")
        logger.info("Deleted card %s", card_id)

    def get_stats(self, now: Optional[datetime] = None) -> CardStats:
        """
        Total cards, cards due now (no lookahead) and cards reviewed today.

        'Today' starts at midnight in the review timezone.
        """
        if now is None:
            now = utc_now()
        tz = self.review_timezone or config.get_review_timezone()
        start_of_day = now.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)

        return CardStats(
            total_cards=self.store.count({}),
            due_cards=self.store.count(due_before_filter(now)),
            reviewed_today=self.store.count({"last_reviewed": {"$gte": start_of_day}}),
        )
