"""
Simple page router for Streamlit tabs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from revision_app.pages.cards import render_cards_page
from revision_app.pages.review import render_review_page
from revision_app.pages.settings import render_settings_page


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[], None]


PAGES = [
    AppPage(title="Review", render=render_review_page),
    AppPage(title="Cards", render=render_cards_page),
    AppPage(title="Settings", render=render_settings_page),
]
