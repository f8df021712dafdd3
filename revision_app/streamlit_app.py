"""
Revision Scheduler - Main App

Streamlit UI for spaced-repetition review of cards.

Run:
    streamlit run revision_app/streamlit_app.py
"""

import streamlit as st

from revision import config
from revision_app.router import PAGES
from revision_app.state import ensure_session_state, get_services


# ---- Page Setup ----

st.set_page_config(
    page_title="Revision Scheduler",
    page_icon="🗂️",
    layout="centered"
)


def main():
    """Main app entry point."""
    get_services()
    ensure_session_state()

    st.title("🗂️ Revision Scheduler")
    if config.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using test database (set TEST_MODE=false in .env for production)")

    for tab, page in zip(st.tabs([page.title for page in PAGES]), PAGES):
        with tab:
            page.render()


main()
