"""
Feedback Button UI

Renders rating buttons with the due date each rating would produce.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import streamlit as st

from revision.fsrs import Rating
from revision_app.ui.formatting import format_relative_date


RATING_ICONS = {
    Rating.AGAIN: "❌",
    Rating.HARD: "😰",
    Rating.GOOD: "👍",
    Rating.EASY: "✨",
}


def render_feedback_buttons(
    preview: dict[Rating, datetime],
    key_suffix: str = "",
) -> Optional[Rating]:
    """
    Render one button per rating.

    Args:
        preview: Due date per rating (from ReviewService.preview)
        key_suffix: Makes widget keys unique per card

    Returns:
        Rating selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this?**")

    selected = None
    for column, rating in zip(st.columns(len(Rating)), Rating):
        due = preview.get(rating)
        caption = format_relative_date(due) if due is not None else ""
        with column:
            if st.button(
                f"{RATING_ICONS[rating]} {rating.label}",
                key=f"rate_{rating.value}_{key_suffix}",
                use_container_width=True,
                help=f"Next review {caption}" if caption else None,
            ):
                selected = rating
            st.caption(caption)
    return selected
