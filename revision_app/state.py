"""
Streamlit session state and service initialization helpers.
"""

from __future__ import annotations

import streamlit as st

from revision import config
from revision.factory import Services, build_services
from revision_app.session_queue import SessionQueue


@st.cache_resource
def get_services() -> Services:
    """
    Build services once per server process (cached across reruns and sessions).
    """
    config.configure_logging()
    return build_services()


def ensure_session_state() -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "queue" not in st.session_state:
        st.session_state.queue = SessionQueue()
    if "queue_loaded" not in st.session_state:
        st.session_state.queue_loaded = False
    if "show_answer" not in st.session_state:
        st.session_state.show_answer = False
    if "session_count" not in st.session_state:
        st.session_state.session_count = 0
    if "last_reviewed_id" not in st.session_state:
        st.session_state.last_reviewed_id = None
    if "editing_card_id" not in st.session_state:
        st.session_state.editing_card_id = None
