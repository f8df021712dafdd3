"""
Session Statistics UI

Renders dashboard counts and session progress.
"""

import streamlit as st

from revision.schemas import CardStats


def render_stats(stats: CardStats) -> None:
    """Render total / due / reviewed-today metrics."""
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Cards", stats.total_cards)
    with col2:
        st.metric("Due", stats.due_cards)
    with col3:
        st.metric("Reviewed today", stats.reviewed_today)


def render_session_progress() -> None:
    """Render session progress; nothing before the first review."""
    if st.session_state.session_count == 0:
        return
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Reviewed this session", st.session_state.session_count)
    with col2:
        st.metric("Left in queue", len(st.session_state.queue))
