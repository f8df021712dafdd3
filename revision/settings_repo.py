"""
Settings repository and the process-wide settings holder.

The retention target lives in a single document (`settings`, `_id: "fsrs"`).
SettingsManager owns the in-memory value for the process lifetime:
loaded once at startup, replaced only through set_retention_target(),
and handed explicitly to the memory model by the services.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from revision import database
from revision.errors import StorageError, ValidationError
from revision.schemas import SchedulerSettings, validation_message

logger = logging.getLogger(__name__)

SETTINGS_ID = "fsrs"


class SettingsRepository:
    """Reads and writes the persisted settings document."""

    def __init__(self, collection: Optional[Collection] = None):
        self._collection = collection

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = database.get_collection(database.SETTINGS_COLLECTION)
        return self._collection

    def load(self) -> Optional[dict]:
        """Raw settings document, or None if nothing was saved yet."""
        try:
            return self.collection.find_one({"_id": SETTINGS_ID})
        except PyMongoError as exc:
            logger.exception("Failed to load settings")
            raise StorageError("Failed to load settings") from exc

    def save(self, settings: SchedulerSettings) -> None:
        try:
            self.collection.update_one(
                {"_id": SETTINGS_ID},
                {"$set": {"request_retention": settings.retention_target}},
                upsert=True,
            )
        except PyMongoError as exc:
            logger.exception("Failed to save settings")
            raise StorageError("Failed to save settings") from exc


class SettingsManager:
    """
    Single owned settings instance for the process.

    Reads are lock-free (the current SchedulerSettings is immutable);
    updates persist first and swap the reference only on success.
    """

    def __init__(self, repository: SettingsRepository):
        self._repository = repository
        self._lock = threading.Lock()
        self._settings = SchedulerSettings()

    @property
    def current(self) -> SchedulerSettings:
        return self._settings

    def get_retention_target(self) -> float:
        return self._settings.retention_target

    def load(self) -> SchedulerSettings:
        """
        Initialize from the persisted value (default if absent or invalid).
        """
        doc = self._repository.load()
        settings = SchedulerSettings()
        if doc is not None and doc.get("request_retention") is not None:
            try:
                settings = SchedulerSettings(retention_target=doc["request_retention"])
            except PydanticValidationError as exc:
                logger.warning(
                    "Ignoring persisted retention target %r: %s",
                    doc["request_retention"],
                    validation_message(exc),
                )

        with self._lock:
            self._settings = settings
        logger.info("Loaded scheduler settings: retention_target=%.2f", settings.retention_target)
        return settings

    def set_retention_target(self, value: float) -> SchedulerSettings:
        """
        Validate, persist and swap in a new retention target.

        Does not recalculate existing cards; that is an explicit,
        separate operation (ReviewService.recalculate_all).

        Raises:
            ValidationError: If value is outside [0.70, 0.97]
            StorageError: If the settings could not be persisted
        """
        try:
            settings = SchedulerSettings(retention_target=value)
        except PydanticValidationError as exc:
            raise ValidationError(validation_message(exc)) from None

        with self._lock:
            self._repository.save(settings)
            self._settings = settings
        logger.info("Retention target set to %.2f", settings.retention_target)
        return settings
