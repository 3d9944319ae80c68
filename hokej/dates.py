"""Parsing of the Czech date and time notation used by league sites."""
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

_DATE = re.compile(r"^(\d{1,2})\.\s*(\d{1,2})\.\s*(\d{4})(?=\s|$)")
_TIME = re.compile(r"(\d{1,2}):(\d{2})")
_RANGE_SEPARATOR = re.compile(r"[-–—]")


def format_timestamp(value: datetime) -> str:
    """Render *value* as a local ISO-8601 timestamp without offset."""

    return value.strftime("%Y-%m-%dT%H:%M:%S")


def _parse_time(time_text: Optional[str]) -> tuple[int, int]:
    if not time_text:
        return 0, 0
    # For "10:00 - 19:00" only the start matters.
    match = _TIME.search(time_text)
    if not match:
        return 0, 0
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return 0, 0
    return hour, minute


def parse_date_time(date_text: Optional[str], time_text: Optional[str] = None) -> Optional[datetime]:
    """Combine a ``D.M.YYYY`` date and an ``HH:MM`` time into a timestamp.

    Returns ``None`` when the date does not match; a missing or unreadable
    time falls back to midnight.
    """

    if not date_text:
        return None
    match = _DATE.match(date_text.strip())
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    hour, minute = _parse_time(time_text)
    try:
        return datetime(year, month, day, hour, minute)
    except ValueError:
        return None


def parse_date_range(date_cell: Optional[str], time_cell: Optional[str] = None) -> List[datetime]:
    """Expand a ``D1 - D2`` cell into one timestamp per date, in text order."""

    if not date_cell:
        return []
    stamps = []
    for fragment in _RANGE_SEPARATOR.split(date_cell):
        stamp = parse_date_time(fragment.strip(), time_cell)
        if stamp is not None:
            stamps.append(stamp)
    if stamps:
        return stamps
    single = parse_date_time(date_cell.strip(), time_cell)
    return [single] if single is not None else []
