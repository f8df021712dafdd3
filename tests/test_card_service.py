"""Tests for card creation, editing, deletion and stats."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from bson import ObjectId

from revision.card_service import CardService
from revision.errors import NotFoundError, ValidationError
from revision.fsrs import Stage
from revision.schemas import DEFAULT_TOPIC_COLOR


T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestCreateCard:
    def test_new_card_schedule(self, card_service):
        card = card_service.create_card("Biology", "Mitochondria", now=T0)

        assert card.due == T0 + timedelta(hours=24)
        assert card.memory.stage == Stage.NEW
        assert card.review_log == []
        assert card.last_reviewed is None
        assert card.version == 0

    def test_fields_are_stripped_and_defaulted(self, card_service):
        card = card_service.create_card("  Biology ", " Cell ", None, now=T0)

        assert (card.topic, card.title, card.content) == ("Biology", "Cell", "")
        assert card.topic_color == DEFAULT_TOPIC_COLOR

    def test_persisted(self, card_service, store):
        card = card_service.create_card("Biology", "Cell", topic_color="#22c55e", now=T0)

        stored = store.docs[ObjectId(card.id)]
        assert stored["topic_color"] == "#22c55e"
        assert stored["memory"]["stage"] == "New"

    def test_sub_millisecond_precision_dropped(self, card_service):
        card = card_service.create_card("Biology", "Cell", now=T0.replace(microsecond=123456))
        assert card.created_at.microsecond == 123000

    @pytest.mark.parametrize("color", ["red", "#12345g", "red;background:url(x)", "#1234"])
    def test_topic_color_must_be_hex(self, card_service, store, color):
        with pytest.raises(ValidationError, match="hex color"):
            card_service.create_card("Biology", "Cell", topic_color=color)
        assert store.docs == {}

    def test_short_hex_color_accepted(self, card_service):
        assert card_service.create_card("Biology", "Cell", topic_color=" #0f0 ", now=T0).topic_color == "#0f0"

    @pytest.mark.parametrize("topic, title", [("", "Cell"), ("Biology", "   "), ("  ", "")])
    def test_blank_required_fields(self, card_service, store, topic, title):
        with pytest.raises(ValidationError):
            card_service.create_card(topic, title)
        assert store.docs == {}


class TestUpdateCard:
    def test_partial_update(self, card_service, new_card):
        card = card_service.update_card(new_card.id, title="Mitochondrion ")

        assert card.title == "Mitochondrion"
        assert card.topic == new_card.topic
        assert card.due == new_card.due
        assert card.version == new_card.version + 1

    def test_blank_title_rejected(self, card_service, new_card):
        with pytest.raises(ValidationError):
            card_service.update_card(new_card.id, title=" ")

    def test_color_edit_must_be_hex(self, card_service, new_card):
        with pytest.raises(ValidationError, match="hex color"):
            card_service.update_card(new_card.id, topic_color="blue;position:fixed")

    def test_nothing_to_update(self, card_service, new_card):
        with pytest.raises(ValidationError, match="No fields to update"):
            card_service.update_card(new_card.id)

    def test_scheduling_fields_cannot_be_edited(self, card_service, new_card):
        card = card_service.update_card(new_card.id, title="Renamed", due=T0)
        assert card.due == new_card.due

    def test_missing_card(self, card_service):
        with pytest.raises(NotFoundError):
            card_service.update_card(str(ObjectId()), title="Anything")

    def test_malformed_id(self, card_service):
        with pytest.raises(ValidationError, match="Invalid card ID"):
            card_service.update_card("123", title="Anything")


class TestDeleteAndList:
    def test_delete(self, card_service, new_card):
        card_service.delete_card(new_card.id)

        with pytest.raises(NotFoundError):
            card_service.get_card(new_card.id)

    def test_delete_missing(self, card_service):
        with pytest.raises(NotFoundError):
            card_service.delete_card(str(ObjectId()))

    def test_list_newest_first(self, card_service):
        for day in range(3):
            card_service.create_card("Topic", f"Card {day}", now=T0 + timedelta(days=day))

        assert [card.title for card in card_service.list_cards()] == ["Card 2", "Card 1", "Card 0"]


class TestStats:
    def test_counts(self, card_service, review_service):
        reviewed = card_service.create_card("Topic", "Reviewed", now=T0)
        card_service.create_card("Topic", "Due", now=T0)
        card_service.create_card("Topic", "Not due", now=T0 + timedelta(days=2))

        now = T0 + timedelta(days=1, hours=3)
        review_service.submit_review(reviewed.id, 3, now=now - timedelta(hours=1))

        stats = card_service.get_stats(now=now)

        assert (stats.total_cards, stats.due_cards, stats.reviewed_today) == (3, 1, 1)

    def test_today_follows_review_timezone(self, store, review_service):
        service = CardService(store, review_timezone=ZoneInfo("America/New_York"))
        card = service.create_card("Topic", "Late night", now=T0)
        # 03:00 UTC on Mar 4 is still Mar 3 in New York
        review_service.submit_review(card.id, 3, now=datetime(2026, 3, 4, 3, 0, tzinfo=timezone.utc))

        evening = datetime(2026, 3, 4, 4, 0, tzinfo=timezone.utc)
        next_morning = datetime(2026, 3, 4, 14, 0, tzinfo=timezone.utc)

        assert service.get_stats(now=evening).reviewed_today == 1
        assert service.get_stats(now=next_morning).reviewed_today == 0
