"""
Service Factory
Wires the Mongo-backed stores, the settings holder and the services.
"""

from __future__ import annotations

from dataclasses import dataclass

from revision import config, database
from revision.card_repo import MongoCardStore
from revision.card_service import CardService
from revision.review_service import ReviewService
from revision.settings_repo import SettingsManager, SettingsRepository


@dataclass(frozen=True)
class Services:
    cards: CardService
    reviews: ReviewService
    settings: SettingsManager


def build_services() -> Services:
    """
    Connect, create indexes and load persisted settings.

    Call once per process; the returned SettingsManager is the single
    owned settings instance.
    """
    database.init_db()

    store = MongoCardStore()
    settings = SettingsManager(SettingsRepository())
    settings.load()

    return Services(
        cards=CardService(store, review_timezone=config.get_review_timezone()),
        reviews=ReviewService(store, settings),
        settings=settings,
    )
