# src/utils.py
"""General-purpose helpers shared by the API and UI layers."""

import logging

import streamlit as st
from streamlit.runtime.scriptrunner import get_script_run_ctx

from src.config import DEV

logger = logging.getLogger("meteodash")


def report_error(ctx: str, e: Exception) -> None:
    """Log an error and, in DEV mode, show it in the Streamlit UI as well.

    The caption is only drawn from the script thread; worker threads (the
    weather cycle and its HTTP requests) have no script context and just log.
    """
    logger.warning("%s: %s: %s", ctx, type(e).__name__, e)
    if DEV and get_script_run_ctx(suppress_warning=True) is not None:
        st.caption(f"⚠ {ctx}: {type(e).__name__}: {e}")
