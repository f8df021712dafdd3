"""
Client-local review queue.

Skipping only reorders this queue. It never touches a card's due date or
review log; the server state changes only on review, undo or delete.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from revision.schemas import Card


@dataclass
class SessionQueue:
    """
    Ordered cards for the current review session.

    `skipped` remembers which cards were pushed to the back so the order
    survives a refresh from the server.
    """
    cards: list[Card] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def current(self) -> Optional[Card]:
        return self.cards[0] if self.cards else None

    def skip(self) -> Optional[Card]:
        """
        Move the current card to the back of the queue.

        Returns:
            The new current card
        """
        if len(self.cards) < 2:
            return self.current
        card = self.cards.pop(0)
        self.cards.append(card)
        if card.id in self.skipped:
            self.skipped.remove(card.id)
        self.skipped.append(card.id)
        return self.current

    def refresh(self, due_cards: list[Card]) -> None:
        """
        Replace the queue with a fresh due selection.

        Server order is kept for cards that were not skipped; skipped cards
        that are still due follow at the end, in skip order.
        """
        by_id = {card.id: card for card in due_cards}
        self.skipped = [card_id for card_id in self.skipped if card_id in by_id]
        skipped = set(self.skipped)
        self.cards = [card for card in due_cards if card.id not in skipped]
        self.cards.extend(by_id[card_id] for card_id in self.skipped)

    def forget_skip(self, card_id: str) -> None:
        """Drop a card from the skip list (after it was reviewed or deleted)."""
        if card_id in self.skipped:
            self.skipped.remove(card_id)
