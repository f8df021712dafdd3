"""
Settings page: retention target and retroactive recalculation.
"""

from __future__ import annotations

import streamlit as st

from revision.errors import RevisionError
from revision.fsrs import MAX_RETENTION, MIN_RETENTION
from revision_app.session_controller import refresh_queue
from revision_app.state import get_services


def render_settings_page() -> None:
    services = get_services()
    current = services.settings.get_retention_target()

    st.markdown("### Retention target")
    st.caption(
        "Probability of remembering a card on its due date. Higher values "
        "mean shorter intervals and more reviews."
    )
    value = st.slider(
        "Desired retention",
        min_value=MIN_RETENTION,
        max_value=MAX_RETENTION,
        value=current,
        step=0.01,
    )
    if st.button("Save", type="primary", disabled=value == current):
        try:
            services.settings.set_retention_target(value)
        except RevisionError as exc:
            st.error(str(exc))
        else:
            st.success(f"Retention target saved ({value:.0%}). Existing cards keep their schedule until recalculated.")

    st.divider()
    st.markdown("### Apply retroactively")
    st.caption("Replays every reviewed card's history under the current retention target.")
    if st.button("Recalculate all cards"):
        try:
            with st.spinner("Recalculating..."):
                result = services.reviews.recalculate_all()
        except RevisionError as exc:
            st.error(f"Recalculation failed: {exc}")
            return
        refresh_queue()
        st.success(f"Recalculated {result.updated} of {result.total} cards.")
