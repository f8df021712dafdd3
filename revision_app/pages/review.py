"""
Review page rendering.
"""

from __future__ import annotations

import streamlit as st

from revision.errors import RevisionError
from revision_app.session_controller import (
    refresh_queue,
    skip_current,
    submit_rating,
    undo_last_review,
)
from revision_app.state import get_services
from revision_app.ui import (
    render_card_back,
    render_card_front,
    render_feedback_buttons,
    render_session_progress,
    render_stats,
)


def render_review_page() -> None:
    """
    Render the review flow (current card or the empty state).
    """
    services = get_services()
    if not st.session_state.queue_loaded:
        refresh_queue()

    render_stats(services.cards.get_stats())
    render_session_progress()
    st.divider()

    card = st.session_state.queue.current
    if card is None:
        _render_no_reviews()
        return

    render_card_front(card)

    if not st.session_state.show_answer:
        col1, col2 = st.columns([3, 1])
        with col1:
            if st.button("Reveal Answer", use_container_width=True, type="primary"):
                st.session_state.show_answer = True
                st.rerun()
        with col2:
            if st.button("Skip", use_container_width=True, help="Move this card to the back of the queue"):
                skip_current()
                st.rerun()
        _render_undo()
        return

    render_card_back(card)
    st.markdown("<br>", unsafe_allow_html=True)

    try:
        preview = services.reviews.preview(card.id)
    except RevisionError as exc:
        st.warning(f"This card is no longer available: {exc}")
        refresh_queue()
        return
    rating = render_feedback_buttons(preview, key_suffix=f"{card.id}_{card.version}")
    if rating is not None and submit_rating(rating):
        st.rerun()

    _render_undo()


def _render_no_reviews() -> None:
    st.success("🎉 No cards due right now.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Check again", use_container_width=True):
            refresh_queue()
            st.rerun()
    with col2:
        _render_undo()


def _render_undo() -> None:
    if st.session_state.last_reviewed_id is None:
        return
    if st.button("↩️ Undo last review", use_container_width=True):
        if undo_last_review():
            st.rerun()
