"""
paths.py – project-relative locations for the dashboard.

Works the same whether the app is launched from the project root
(streamlit run main.py) or from somewhere else.
"""

from __future__ import annotations

from pathlib import Path

# src/paths.py -> src -> project root
ROOT_DIR = Path(__file__).resolve().parent.parent

ASSETS = ROOT_DIR / "assets"
LOGS = ROOT_DIR / "logs"


def asset_path(*parts: str) -> Path:
    """Return a path inside assets/."""
    return ASSETS.joinpath(*parts)


def ensure_dirs() -> None:
    """Create runtime directories (logs/) if missing."""
    LOGS.mkdir(parents=True, exist_ok=True)
