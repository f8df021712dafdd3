"""Shared fixtures: an in-memory card store and settings repository."""

import copy
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from revision.card_repo import card_from_document, card_to_document, changes_to_document
from revision.card_service import CardService
from revision.errors import ConflictError, NotFoundError, StorageError
from revision.review_service import ReviewService
from revision.settings_repo import SETTINGS_ID, SettingsManager


T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _matches(doc, filter):
    for key, condition in filter.items():
        value = doc.get(key)
        if isinstance(condition, dict):
            for op, operand in condition.items():
                if value is None:
                    return False
                if op == "$lte" and not value <= operand:
                    return False
                if op == "$gte" and not value >= operand:
                    return False
        elif value != condition:
            return False
    return True


class InMemoryCardStore:
    """CardStore double with the same version-stamp semantics as MongoCardStore."""

    def __init__(self):
        self.docs = {}

    def find(self, filter, sort=None):
        docs = [doc for doc in self.docs.values() if _matches(doc, filter)]
        for key, direction in reversed(list(sort or [])):
            docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return [card_from_document(copy.deepcopy(doc)) for doc in docs]

    def find_one(self, filter):
        for doc in self.docs.values():
            if _matches(doc, filter):
                return card_from_document(copy.deepcopy(doc))
        return None

    def insert(self, card):
        doc = card_to_document(card)
        self.docs[doc["_id"]] = doc
        return str(doc["_id"])

    def update_by_id(self, card_id, changes, expected_version):
        doc = self.docs.get(ObjectId(card_id))
        if doc is None:
            raise NotFoundError("Card not found")
        if doc.get("version", 0) != expected_version:
            raise ConflictError(f"Card {card_id} was modified concurrently")
        doc.update(copy.deepcopy(changes_to_document(changes)))
        doc["version"] = doc.get("version", 0) + 1
        return card_from_document(copy.deepcopy(doc))

    def delete_by_id(self, card_id):
        return self.docs.pop(ObjectId(card_id), None) is not None

    def count(self, filter):
        return sum(1 for doc in self.docs.values() if _matches(doc, filter))


class InMemorySettingsRepository:
    def __init__(self, doc=None, fail_on_save=False):
        self.doc = doc
        self.fail_on_save = fail_on_save

    def load(self):
        return self.doc

    def save(self, settings):
        if self.fail_on_save:
            raise StorageError("Failed to save settings")
        self.doc = {"_id": SETTINGS_ID, "request_retention": settings.retention_target}


@pytest.fixture
def store():
    return InMemoryCardStore()


@pytest.fixture
def settings_repo():
    return InMemorySettingsRepository()


@pytest.fixture
def settings(settings_repo):
    manager = SettingsManager(settings_repo)
    manager.load()
    return manager


@pytest.fixture
def card_service(store):
    return CardService(store, review_timezone=timezone.utc)


@pytest.fixture
def review_service(store, settings):
    return ReviewService(store, settings)


@pytest.fixture
def new_card(card_service):
    return card_service.create_card("Biology", "Mitochondria", "Powerhouse of the cell", now=T0)


@pytest.fixture
def make_settings_repo():
    return InMemorySettingsRepository
