"""Tests for submitting, undoing, previewing and recalculating reviews."""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from revision.errors import ConflictError, NotFoundError, StateError, ValidationError
from revision.fsrs import Rating, Stage, replay
from revision.review_service import RECALCULATE_ATTEMPTS


T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestSubmitReview:
    def test_first_review(self, review_service, new_card):
        now = T0 + timedelta(days=1)
        card = review_service.submit_review(new_card.id, 3, now=now)

        assert card.memory.stage == Stage.LEARNING
        assert card.last_reviewed == now
        assert card.version == new_card.version + 1
        assert [(e.rating, e.rating_text) for e in card.review_log] == [(Rating.GOOD, "Good")]
        assert card.due > now

    def test_log_grows_in_order(self, review_service, new_card):
        first = T0 + timedelta(days=1)
        second = first + timedelta(days=3)
        review_service.submit_review(new_card.id, 3, now=first)
        card = review_service.submit_review(new_card.id, 1, now=second)

        assert [e.timestamp for e in card.review_log] == [first, second]
        assert card.memory.stage == Stage.RELEARNING
        assert card.memory.lapses == 1

    @pytest.mark.parametrize("rating", [0, 5, "good", None, 2.5])
    def test_invalid_rating_leaves_card_untouched(self, review_service, card_service, new_card, rating):
        with pytest.raises(ValidationError):
            review_service.submit_review(new_card.id, rating, now=T0 + timedelta(days=1))

        assert card_service.get_card(new_card.id).model_dump() == new_card.model_dump()

    def test_malformed_id(self, review_service):
        with pytest.raises(ValidationError):
            review_service.submit_review("not-an-id", 3)

    def test_missing_card(self, review_service):
        with pytest.raises(NotFoundError):
            review_service.submit_review(str(ObjectId()), 3)

    def test_uses_current_retention_target(self, review_service, settings, card_service):
        relaxed = card_service.create_card("Topic", "A", now=T0)
        strict = card_service.create_card("Topic", "B", now=T0)
        now = T0 + timedelta(days=1)

        settings.set_retention_target(0.75)
        relaxed = review_service.submit_review(relaxed.id, 3, now=now)
        settings.set_retention_target(0.95)
        strict = review_service.submit_review(strict.id, 3, now=now)

        assert strict.due < relaxed.due

    def test_card_without_version_stamp_can_be_reviewed(self, review_service, store, new_card):
        del store.docs[ObjectId(new_card.id)]["version"]

        card = review_service.submit_review(new_card.id, 3, now=T0 + timedelta(days=1))

        assert card.version == 1
        assert len(card.review_log) == 1

    def test_concurrent_change_raises_conflict(self, review_service, store, new_card, monkeypatch):
        store.update_by_id(new_card.id, {"title": "Edited elsewhere"}, new_card.version)
        monkeypatch.setattr(store, "find_one", lambda filter: new_card)

        with pytest.raises(ConflictError):
            review_service.submit_review(new_card.id, 3, now=T0 + timedelta(days=1))

        assert store.docs[ObjectId(new_card.id)]["review_log"] == []


class TestUndo:
    def test_empty_log_raises_state_error(self, review_service, store, new_card):
        with pytest.raises(StateError):
            review_service.undo(new_card.id)

        assert store.docs[ObjectId(new_card.id)]["version"] == new_card.version

    def test_undo_restores_previous_schedule(self, review_service, new_card):
        before = review_service.submit_review(new_card.id, 3, now=T0 + timedelta(days=1))
        review_service.submit_review(new_card.id, 2, now=before.due + timedelta(minutes=7))

        card = review_service.undo(new_card.id)

        assert len(card.review_log) == len(before.review_log)
        assert card.due == before.due
        assert card.memory == before.memory
        assert card.last_reviewed == before.last_reviewed

    def test_undo_only_review_returns_to_new(self, review_service, new_card):
        review_service.submit_review(new_card.id, 4, now=T0 + timedelta(hours=30))

        card = review_service.undo(new_card.id)

        assert card.review_log == []
        assert card.memory.stage == Stage.NEW
        assert card.due == new_card.due
        assert card.last_reviewed is None

    def test_missing_card(self, review_service):
        with pytest.raises(NotFoundError):
            review_service.undo(str(ObjectId()))


class TestPreview:
    def test_preview_does_not_write(self, review_service, store, new_card):
        dues = review_service.preview(new_card.id, now=T0 + timedelta(days=1))

        assert set(dues) == set(Rating)
        assert store.docs[ObjectId(new_card.id)]["version"] == new_card.version

    def test_preview_matches_submission(self, review_service, new_card):
        now = T0 + timedelta(days=1)
        dues = review_service.preview(new_card.id, now=now)
        card = review_service.submit_review(new_card.id, Rating.HARD, now=now)
        assert card.due == dues[Rating.HARD]


class TestRecalculateAll:
    def _review_twice(self, review_service, card_id):
        card = review_service.submit_review(card_id, 3, now=T0 + timedelta(days=1))
        return review_service.submit_review(card_id, 3, now=card.due)

    def test_recalculation_scope(self, review_service, card_service, settings, new_card):
        untouched = card_service.create_card("Topic", "Never reviewed", now=T0)
        reviewed = self._review_twice(review_service, new_card.id)

        settings.set_retention_target(0.8)
        result = review_service.recalculate_all()

        assert (result.updated, result.total) == (1, 2)
        assert card_service.get_card(untouched.id).model_dump() == untouched.model_dump()

        card = card_service.get_card(new_card.id)
        memory, due = replay(reviewed.review_log, reviewed.created_at, 0.8)
        assert card.memory == memory
        assert card.due == due
        assert card.due > reviewed.due

    def test_retention_change_alone_keeps_schedules(self, review_service, card_service, settings, new_card):
        reviewed = self._review_twice(review_service, new_card.id)

        settings.set_retention_target(0.75)

        card = card_service.get_card(new_card.id)
        assert card.memory == reviewed.memory
        assert card.due == reviewed.due
        assert card.version == reviewed.version

    def test_recalculation_is_idempotent(self, review_service, card_service, new_card):
        self._review_twice(review_service, new_card.id)

        review_service.recalculate_all()
        first = card_service.get_card(new_card.id)
        review_service.recalculate_all()
        second = card_service.get_card(new_card.id)

        assert (first.memory, first.due) == (second.memory, second.due)

    def test_retries_on_conflict(self, review_service, store, card_service, new_card, monkeypatch):
        self._review_twice(review_service, new_card.id)
        stale = store.find({})
        later = store.find_one({"_id": ObjectId(new_card.id)}).due
        fresh = review_service.submit_review(new_card.id, 4, now=later)
        monkeypatch.setattr(store, "find", lambda filter, sort=None: stale)

        result = review_service.recalculate_all()

        assert result.updated == 1
        card = card_service.get_card(new_card.id)
        assert len(card.review_log) == 3
        assert card.due == fresh.due

    def test_gives_up_after_repeated_conflicts(self, review_service, store, new_card, monkeypatch):
        self._review_twice(review_service, new_card.id)

        def always_conflict(card_id, changes, expected_version):
            raise ConflictError("busy")

        monkeypatch.setattr(store, "update_by_id", always_conflict)
        calls = []
        original_find_one = store.find_one
        monkeypatch.setattr(
            store, "find_one", lambda filter: calls.append(filter) or original_find_one(filter)
        )

        with pytest.raises(ConflictError):
            review_service.recalculate_all()
        assert len(calls) == RECALCULATE_ATTEMPTS - 1

    def test_skips_card_deleted_midway(self, review_service, store, new_card, monkeypatch):
        self._review_twice(review_service, new_card.id)
        stale = store.find({})
        store.delete_by_id(new_card.id)
        monkeypatch.setattr(store, "find", lambda filter, sort=None: stale)

        result = review_service.recalculate_all()
        assert (result.updated, result.total) == (0, 1)
