# src/ui/common.py
from __future__ import annotations

import html as html_lib

import streamlit as st

from src.paths import asset_path


def load_css(file_name: str) -> None:
    path = asset_path(file_name)
    if not path.exists():
        return
    with path.open("r", encoding="utf-8") as f:
        st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)


def section_title(html: str, mt: int = 10, mb: int = 10) -> None:
    """Render a section title with customizable margins.

    Args:
        html: HTML content for the title.
        mt: Top margin in pixels (default: 10).
        mb: Bottom margin in pixels (default: 10).
    """
    st.markdown(
        f"<div class='section-title' style='margin:{mt}px 0 {mb}px 0'>{html}</div>",
        unsafe_allow_html=True,
    )


def status_message(text: str, error: bool = False) -> None:
    css = "status-message status-message--error" if error else "status-message"
    st.markdown(
        f"<div class='{css}'>{html_lib.escape(text)}</div>",
        unsafe_allow_html=True,
    )


def metric_card_html(label: str, value: str, helper: str | None = None) -> str:
    """HTML for one metric card; the helper line is omitted when empty."""
    helper_html = (
        f"<p class='metric-card__helper'>{html_lib.escape(helper)}</p>" if helper else ""
    )
    return (
        "<article class='metric-card'>"
        f"<p class='metric-card__label'>{html_lib.escape(label)}</p>"
        f"<p class='metric-card__value'>{html_lib.escape(value)}</p>"
        f"{helper_html}"
        "</article>"
    )
