# main.py
"""Main entry point for the Mikens Meteorología Streamlit application."""

import sys
import traceback

import streamlit as st

from src.config import PAGE_AUTOREFRESH_MS
from src.logger_config import setup_logging
from src.paths import ensure_dirs
from src.ui import card_weather
from src.ui.common import load_css

ensure_dirs()

logger = setup_logging()


def main() -> None:
    """Initialize and render the dashboard layout."""
    try:
        st.set_page_config(
            page_title="Mikens Meteorología",
            layout="wide",
            page_icon="🌤️",
        )
        load_css("style.css")

        # rerun only the card, so the periodic refresh done by the session
        # thread shows up without reloading the page (which would start a new session)
        st.fragment(run_every=PAGE_AUTOREFRESH_MS / 1000)(card_weather)()

    except KeyboardInterrupt:
        logger.info("Dashboard shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unhandled error: {str(e)}")
        logger.error(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
