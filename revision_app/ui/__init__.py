"""UI Components for the review client"""

from revision_app.ui.card_view import render_card_front, render_card_back
from revision_app.ui.session_stats import render_stats, render_session_progress
from revision_app.ui.feedback_buttons import render_feedback_buttons

__all__ = [
    "render_card_front",
    "render_card_back",
    "render_stats",
    "render_session_progress",
    "render_feedback_buttons",
]
