"""Configuration defaults for the import pipeline.

Every value can be overridden through the environment; command-line flags in
:mod:`main` take precedence over both.
"""
from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Optional


def current_season(today: Optional[date] = None) -> str:
    """Return the ``YYYY-YYYY`` season containing *today* (seasons start in July)."""

    today = today or date.today()
    start = today.year if today.month >= 7 else today.year - 1
    return f"{start}-{start + 1}"


def _debug_dir_from_env() -> Optional[Path]:
    raw = os.environ.get("HOKEJ_DEBUG_DIR")
    if raw is None:
        return Path("data") / "debug"
    # An explicitly empty value turns the HTML dumps off.
    return Path(raw) if raw.strip() else None


DEFAULT_SEASON = os.environ.get("HOKEJ_SEASON") or current_season()
DEFAULT_TIMEOUT = float(os.environ.get("HOKEJ_TIMEOUT", "10"))
DEFAULT_PROFILE = os.environ.get("HOKEJ_PROFILE", "ustecky")
DEBUG_DIR = _debug_dir_from_env()

# Most youth competitions finish their regular part within twelve rounds.
MAX_ROUNDS = 12

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0 Safari/537.36 hokej-goalie-tracker/0.1"
)
