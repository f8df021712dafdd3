"""
Review session helpers for the Streamlit app.

The due selection is re-fetched after every mutating call (review, undo,
delete, recalculation); skipping only reorders the local queue.
"""

from __future__ import annotations

import logging

import streamlit as st

from revision.errors import RevisionError
from revision.fsrs import Rating
from revision_app.state import get_services

logger = logging.getLogger(__name__)


def refresh_queue() -> None:
    """Reload due cards from the store, keeping local skip order."""
    services = get_services()
    st.session_state.queue.refresh(services.cards.list_due_cards())
    st.session_state.queue_loaded = True
    st.session_state.show_answer = False


def skip_current() -> None:
    st.session_state.queue.skip()
    st.session_state.show_answer = False


def submit_rating(rating: Rating) -> bool:
    """Submit a review for the current card and reload the queue. False on failure."""
    card = st.session_state.queue.current
    if card is None:
        return False

    services = get_services()
    try:
        services.reviews.submit_review(card.id, rating)
    except RevisionError as exc:
        logger.warning("Review of card %s failed: %s", card.id, exc)
        st.error(f"Failed to submit review: {exc}")
        return False

    st.session_state.queue.forget_skip(card.id)
    st.session_state.last_reviewed_id = card.id
    st.session_state.session_count += 1
    refresh_queue()
    return True


def undo_last_review() -> bool:
    """Undo the most recent review made in this session."""
    card_id = st.session_state.last_reviewed_id
    if card_id is None:
        return False

    services = get_services()
    try:
        services.reviews.undo(card_id)
    except RevisionError as exc:
        logger.warning("Undo for card %s failed: %s", card_id, exc)
        st.error(f"Failed to undo review: {exc}")
        return False

    st.session_state.last_reviewed_id = None
    st.session_state.session_count = max(0, st.session_state.session_count - 1)
    refresh_queue()
    return True
