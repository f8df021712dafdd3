"""
Review service: submit, undo, preview and recalculation.

Main workflow:
1. Load the card (by id)
2. Submit: advance() the stored state and append the event to the log
3. Undo / recalculate: rebuild state from the log with replay()
4. Write back with the card's version stamp

The retention target is read from the SettingsManager once per operation
and passed explicitly into the memory model.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from revision import fsrs
from revision.card_repo import CardStore, to_object_id
from revision.errors import ConflictError, NotFoundError, StateError
from revision.fsrs import Rating
from revision.schemas import Card, RecalculationResult, ReviewEvent
from revision.scheduler import utc_now
from revision.settings_repo import SettingsManager

logger = logging.getLogger(__name__)

RECALCULATE_ATTEMPTS = 3


class ReviewService:
    """Review state machine over a card store."""

    def __init__(self, store: CardStore, settings: SettingsManager):
        self.store = store
        self.settings = settings

    def _load(self, card_id: str) -> Card:
        card = self.store.find_one({"_id": to_object_id(card_id)})
        if card is None:
            raise NotFoundError("Card not found")
        return card

    def submit_review(
        self,
        card_id: str,
        rating: int,
        now: Optional[datetime] = None,
    ) -> Card:
        """
        Record a review and reschedule the card.

        Args:
            card_id: Card identifier
            rating: 1 (Again), 2 (Hard), 3 (Good) or 4 (Easy)
            now: Review time (defaults to current UTC time)

        Returns:
            The updated card

        Raises:
            ValidationError: Bad id or rating (nothing is read or written)
            NotFoundError: If the card does not exist
            ConflictError: If the card changed between read and write
        """
        to_object_id(card_id)
        rating = fsrs.parse_rating(rating)
        now = fsrs.truncate_to_millis(now) if now is not None else utc_now()

        card = self._load(card_id)
        memory, due = fsrs.advance(
            card.memory, rating, now, self.settings.get_retention_target()
        )

        updated = self.store.update_by_id(
            card.id,
            {
                "memory": memory,
                "due": due,
                "last_reviewed": now,
                "review_log": [*card.review_log, ReviewEvent.record(rating, now)],
            },
            expected_version=card.version,
        )
        logger.info(
            "Reviewed card %s: %s -> %s, due %s",
            card.id, rating.label, memory.stage.value, due.isoformat(),
        )
        return updated

    def undo(self, card_id: str) -> Card:
        """
        Remove the most recent review and rebuild state by replay.

        With an empty remaining log the card returns to its just-created
        state (New, due = created_at + 24h).

        Raises:
            ValidationError: If card_id is malformed
            NotFoundError: If the card does not exist
            StateError: If there is no review to undo (nothing is written)
            ConflictError: If the card changed between read and write
        """
        card = self._load(card_id)
        if not card.review_log:
            raise StateError("No reviews to undo")

        remaining = card.review_log[:-1]
        memory, due = fsrs.replay(
            remaining, card.created_at, self.settings.get_retention_target()
        )

        updated = self.store.update_by_id(
            card.id,
            {
                "memory": memory,
                "due": due,
                "review_log": remaining,
                "last_reviewed": remaining[-1].timestamp if remaining else None,
            },
            expected_version=card.version,
        )
        logger.info("Undid last review of card %s (%d left)", card.id, len(remaining))
        return updated

    def preview(self, card_id: str, now: Optional[datetime] = None) -> dict[Rating, datetime]:
        """
        Due date the card would get for each rating, without saving anything.

        Raises:
            ValidationError: If card_id is malformed
            NotFoundError: If the card does not exist
        """
        card = self._load(card_id)
        now = fsrs.truncate_to_millis(now) if now is not None else utc_now()
        return fsrs.preview(card.memory, now, self.settings.get_retention_target())

    def recalculate_all(self) -> RecalculationResult:
        """
        Replay every reviewed card under the current retention target.

        Cards with an empty log are skipped: their due date does not depend
        on the retention target. A card that changes mid-recalculation is
        re-read and replayed again so a concurrent review is never
        overwritten by a stale replay.
        """
        retention_target = self.settings.get_retention_target()
        cards = self.store.find({})
        updated = 0

        for card in cards:
            if card.review_log and self._recalculate_card(card, retention_target):
                updated += 1

        logger.info(
            "Recalculated %d of %d cards at retention %.2f",
            updated, len(cards), retention_target,
        )
        return RecalculationResult(updated=updated, total=len(cards))

    def _recalculate_card(self, card: Card, retention_target: float) -> bool:
        """Write the replayed state of one card. False if it vanished or lost its log."""
        for attempt in range(1, RECALCULATE_ATTEMPTS + 1):
            memory, due = fsrs.replay(card.review_log, card.created_at, retention_target)
            try:
                self.store.update_by_id(
                    card.id,
                    {"memory": memory, "due": due},
                    expected_version=card.version,
                )
                return True
            except NotFoundError:
                logger.info("Card %s was deleted during recalculation", card.id)
                return False
            except ConflictError:
                if attempt == RECALCULATE_ATTEMPTS:
                    raise
                logger.warning(
                    "Card %s changed during recalculation, retrying (%d/%d)",
                    card.id, attempt, RECALCULATE_ATTEMPTS,
                )
                card = self.store.find_one({"_id": to_object_id(card.id)})
                if card is None or not card.review_log:
                    return False
        return False
