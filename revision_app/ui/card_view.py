"""
Card UI Component

Renders a review card: topic badge, title, content and recent history.
"""

from __future__ import annotations

import html

import streamlit as st

from revision.schemas import Card
from revision_app.ui.formatting import badge_color, format_relative_date, recent_history


def render_card_front(card: Card) -> None:
    st.markdown(
        f"""
        <span style="background:{badge_color(card.topic_color)};color:#fff;
              padding:0.15rem 0.6rem;border-radius:999px;font-size:0.8rem;">
            {html.escape(card.topic)}
        </span>
        """,
        unsafe_allow_html=True,
    )
    st.subheader(card.title)
    st.caption(f"Added {format_relative_date(card.created_at)}")


def render_card_back(card: Card) -> None:
    if card.content:
        st.markdown(card.content)

    history = recent_history(card.review_log)
    if history:
        st.markdown("**Recent reviews**")
        for event in history:
            st.markdown(f"- {format_relative_date(event.timestamp)}: {event.rating_text}")
