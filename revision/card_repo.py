"""
MongoDB repository for cards.

Persists Card entities (memory state and review log embedded in the card
document) and translates between documents and schema objects.

Every update is guarded by the card's version stamp, so a concurrent
writer makes the second update fail loudly instead of being lost.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional, Protocol, Sequence, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from revision import database
from revision.errors import ConflictError, NotFoundError, StorageError, ValidationError
from revision.fsrs import MemoryState, Rating, Stage
from revision.schemas import DEFAULT_TOPIC_COLOR, Card, ReviewEvent

logger = logging.getLogger(__name__)

SortSpec = Sequence[Tuple[str, int]]


# ---- Card Store Contract ----

class CardStore(Protocol):
    """Collection API consumed by the services. Filters use MongoDB query syntax."""

    def find(self, filter: dict, sort: Optional[SortSpec] = None) -> list[Card]: ...

    def find_one(self, filter: dict) -> Optional[Card]: ...

    def insert(self, card: Card) -> str: ...

    def update_by_id(self, card_id: str, changes: dict, expected_version: int) -> Card: ...

    def delete_by_id(self, card_id: str) -> bool: ...

    def count(self, filter: dict) -> int: ...


def to_object_id(card_id: str) -> ObjectId:
    """
    Parse a card identifier.

    Raises:
        ValidationError: If the identifier is not a valid ObjectId
    """
    if not isinstance(card_id, str) or not ObjectId.is_valid(card_id):
        raise ValidationError("Invalid card ID")
    return ObjectId(card_id)


# ---- Document Mapping ----

def memory_to_document(memory: MemoryState) -> dict:
    return {
        "stage": memory.stage.value,
        "stability": memory.stability,
        "difficulty": memory.difficulty,
        "reps": memory.reps,
        "lapses": memory.lapses,
        "last_review": memory.last_review,
    }


def memory_from_document(doc: Optional[dict]) -> MemoryState:
    if not doc:
        return MemoryState()
    return MemoryState(
        stage=Stage(doc.get("stage", Stage.NEW.value)),
        stability=doc.get("stability", 0.0),
        difficulty=doc.get("difficulty", 0.0),
        reps=doc.get("reps", 0),
        lapses=doc.get("lapses", 0),
        last_review=doc.get("last_review"),
    )


def event_to_document(event: ReviewEvent) -> dict:
    return {
        "timestamp": event.timestamp,
        "rating": int(event.rating),
        "rating_text": event.rating_text,
    }


def event_from_document(doc: dict) -> ReviewEvent:
    rating = Rating(doc["rating"])
    return ReviewEvent(
        timestamp=doc["timestamp"],
        rating=rating,
        rating_text=doc.get("rating_text") or rating.label,
    )


def _field_to_document(value: Any) -> Any:
    if isinstance(value, MemoryState):
        return memory_to_document(value)
    if isinstance(value, ReviewEvent):
        return event_to_document(value)
    if isinstance(value, list):
        return [_field_to_document(item) for item in value]
    return value


def changes_to_document(changes: dict) -> dict:
    """Convert a partial update (Card attribute -> value) into document fields."""
    if "id" in changes or "version" in changes:
        raise ValueError("id and version cannot be updated directly")
    return {key: _field_to_document(value) for key, value in changes.items()}


def card_to_document(card: Card) -> dict:
    """Full document for a card (used on insert)."""
    return {
        "_id": ObjectId(card.id),
        "topic": card.topic,
        "topic_color": card.topic_color,
        "title": card.title,
        "content": card.content,
        "created_at": card.created_at,
        "memory": memory_to_document(card.memory),
        "due": card.due,
        "last_reviewed": card.last_reviewed,
        "review_log": [event_to_document(event) for event in card.review_log],
        "version": card.version,
    }


def card_from_document(doc: dict) -> Card:
    return Card(
        id=str(doc["_id"]),
        topic=doc["topic"],
        topic_color=doc.get("topic_color") or DEFAULT_TOPIC_COLOR,
        title=doc["title"],
        content=doc.get("content") or "",
        created_at=doc["created_at"],
        memory=memory_from_document(doc.get("memory")),
        due=doc["due"],
        last_reviewed=doc.get("last_reviewed"),
        review_log=[event_from_document(event) for event in doc.get("review_log") or []],
        version=doc.get("version", 0),
    )


# ---- MongoDB Implementation ----

@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.exception("Card store failure while trying to %s", action)
        raise StorageError(f"Failed to {action}") from exc


class MongoCardStore:
    """CardStore backed by a pymongo collection."""

    def __init__(self, collection: Optional[Collection] = None):
        self._collection = collection

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = database.get_collection(database.CARDS_COLLECTION)
        return self._collection

    def find(self, filter: dict, sort: Optional[SortSpec] = None) -> list[Card]:
        with _storage_errors("fetch cards"):
            cursor = self.collection.find(filter)
            if sort:
                cursor = cursor.sort(list(sort))
            return [card_from_document(doc) for doc in cursor]

    def find_one(self, filter: dict) -> Optional[Card]:
        with _storage_errors("fetch card"):
            doc = self.collection.find_one(filter)
        return card_from_document(doc) if doc is not None else None

    def insert(self, card: Card) -> str:
        with _storage_errors("create card"):
            result = self.collection.insert_one(card_to_document(card))
        return str(result.inserted_id)

    def update_by_id(self, card_id: str, changes: dict, expected_version: int) -> Card:
        """
        Apply a partial update if the stored version still matches.

        Raises:
            NotFoundError: If the card no longer exists
            ConflictError: If another writer updated the card first
        """
        oid = ObjectId(card_id)
        with _storage_errors("update card"):
            doc = self.collection.find_one_and_update(
                version_filter(oid, expected_version),
                {"$set": changes_to_document(changes), "$inc": {"version": 1}},
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                if self.collection.count_documents({"_id": oid}, limit=1) == 0:
                    raise NotFoundError("Card not found")
                raise ConflictError(
                    f"Card {card_id} was modified concurrently (expected version {expected_version})"
                )
        return card_from_document(doc)

    def delete_by_id(self, card_id: str) -> bool:
        with _storage_errors("delete card"):
            result = self.collection.delete_one({"_id": ObjectId(card_id)})
        return result.deleted_count > 0

    def count(self, filter: dict) -> int:
        with _storage_errors("count cards"):
            return self.collection.count_documents(filter)


def version_filter(oid: ObjectId, expected_version: int) -> dict:
    """
    Filter matching a card at the expected version.

    Documents written before version stamps existed have no `version`
    field and load as version 0, so version 0 also matches a missing field.
    """
    if expected_version == 0:
        return {"_id": oid, "$or": [{"version": 0}, {"version": {"$exists": False}}]}
    return {"_id": oid, "version": expected_version}


def due_before_filter(threshold: datetime) -> dict:
    """Filter for cards with due <= threshold."""
    return {"due": {"$lte": threshold}}
