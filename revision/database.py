"""
Database - MongoDB connection management

Holds the pooled client shared by the card store and the settings
repository, and creates indexes.

This module handles ONLY connection setup.
Document mapping lives in the repositories.
"""

from __future__ import annotations

import logging
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from revision import config
from revision.errors import StorageError

logger = logging.getLogger(__name__)

CARDS_COLLECTION = "cards"
SETTINGS_COLLECTION = "settings"

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """
    Get the shared MongoDB client.

    tz_aware=True so stored datetimes come back as UTC-aware values and
    compare cleanly with review timestamps.
    """
    global _client

    if _client is None:
        _client = MongoClient(
            config.get_mongo_uri(),
            tz_aware=True,
            maxPoolSize=10,      # Connection pool size
            minPoolSize=1,       # Keep at least 1 connection alive
            maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
        )
    return _client


def get_database() -> Database:
    """Get the configured database (test database when TEST_MODE=true)."""
    return get_client()[config.get_database_name()]


def get_collection(name: str) -> Collection:
    """Get a collection from the configured database."""
    return get_database()[name]


def close_client() -> None:
    """Close the shared client; the next call reconnects."""
    global _client

    if _client is not None:
        _client.close()
        _client = None


def init_db(database: Optional[Database] = None) -> None:
    """
    Create indexes used by due selection and card listing.

    Safe to call multiple times - create_index is idempotent.
    """
    database = database if database is not None else get_database()
    cards = database[CARDS_COLLECTION]
    try:
        cards.create_index([("due", ASCENDING)])
        cards.create_index([("created_at", DESCENDING)])
    except PyMongoError as exc:
        logger.exception("Failed to create card indexes")
        raise StorageError("Failed to initialize database") from exc
