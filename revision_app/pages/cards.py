"""
Card management page: add, edit and delete cards.
"""

from __future__ import annotations

import streamlit as st

from revision.errors import RevisionError
from revision.schemas import DEFAULT_TOPIC_COLOR, Card
from revision_app.session_controller import refresh_queue
from revision_app.state import get_services
from revision_app.ui.formatting import badge_color, format_relative_date


def render_cards_page() -> None:
    _render_add_form()
    st.divider()

    cards = get_services().cards.list_cards()
    st.markdown(f"### All cards ({len(cards)})")
    if not cards:
        st.info("No cards yet. Add one above.")
        return

    for card in cards:
        if st.session_state.editing_card_id == card.id:
            _render_edit_form(card)
        else:
            _render_card_row(card)


def _render_add_form() -> None:
    st.markdown("### Add a card")
    with st.form("add_card", clear_on_submit=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            topic = st.text_input("Topic")
        with col2:
            topic_color = st.color_picker("Color", DEFAULT_TOPIC_COLOR)
        title = st.text_input("Title")
        content = st.text_area("Content (optional)")
        submitted = st.form_submit_button("Add card", type="primary")

    if submitted:
        try:
            card = get_services().cards.create_card(topic, title, content, topic_color)
        except RevisionError as exc:
            st.error(str(exc))
            return
        st.success(f"Added '{card.title}' (first review {format_relative_date(card.due)})")


def _render_card_row(card: Card) -> None:
    with st.container(border=True):
        st.markdown(f"**{card.title}** · {card.topic}")
        st.caption(
            f"{card.memory.stage.value} · {card.review_count} reviews · "
            f"due {format_relative_date(card.due)}"
        )
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Edit", key=f"edit_{card.id}", use_container_width=True):
                st.session_state.editing_card_id = card.id
                st.rerun()
        with col2:
            if st.button("Delete", key=f"delete_{card.id}", use_container_width=True):
                _delete(card)


def _render_edit_form(card: Card) -> None:
    with st.form(f"edit_{card.id}"):
        topic = st.text_input("Topic", card.topic)
        topic_color = st.color_picker("Color", badge_color(card.topic_color))
        title = st.text_input("Title", card.title)
        content = st.text_area("Content", card.content)
        col1, col2 = st.columns(2)
        with col1:
            saved = st.form_submit_button("Save", type="primary", use_container_width=True)
        with col2:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        st.session_state.editing_card_id = None
        st.rerun()
    if saved:
        try:
            get_services().cards.update_card(
                card.id, topic=topic, title=title, content=content, topic_color=topic_color
            )
        except RevisionError as exc:
            st.error(str(exc))
            return
        st.session_state.editing_card_id = None
        refresh_queue()
        st.rerun()


def _delete(card: Card) -> None:
    try:
        get_services().cards.delete_card(card.id)
    except RevisionError as exc:
        st.error(str(exc))
        return
    st.session_state.queue.forget_skip(card.id)
    if st.session_state.last_reviewed_id == card.id:
        st.session_state.last_reviewed_id = None
    refresh_queue()
    st.rerun()
