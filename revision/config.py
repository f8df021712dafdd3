"""
Environment configuration.

Values come from the process environment, optionally seeded from a
local .env file.
"""

from __future__ import annotations

import logging
import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


PROD_DB_NAME = "revision_scheduler"
TEST_DB_NAME = "test_revision_scheduler"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_mongo_uri() -> str:
    """
    Get the MongoDB connection string.

    Raises:
        ValueError: If MONGO_URI is not set
    """
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_database_name() -> str:
    """
    Get the database name.

    DB_NAME overrides the default; TEST_MODE=true always selects the
    test database so a test run never touches production data.
    """
    if is_test_mode():
        return TEST_DB_NAME
    return os.getenv("DB_NAME", PROD_DB_NAME)


def get_review_timezone() -> ZoneInfo:
    """Timezone that defines 'today' for statistics (REVIEW_TIMEZONE, default UTC)."""
    return ZoneInfo(os.getenv("REVIEW_TIMEZONE", "UTC"))


def configure_logging() -> None:
    """Apply basic logging configuration using LOG_LEVEL (default INFO)."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
