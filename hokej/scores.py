"""Score and completion status extraction."""
from __future__ import annotations

import re
from datetime import datetime
from typing import NamedTuple, Optional

_SCORE = re.compile(r"(\d+)\s*[:\-]\s*(\d+)")


class Score(NamedTuple):
    home: int
    away: int


def parse_score(status_text: Optional[str]) -> Optional[Score]:
    """Return the first ``home:away`` pair in *status_text*.

    Accepts ``[3:2]``, ``3:2`` and ``3-2``. ``None`` means the match has no
    result yet.
    """

    if not status_text:
        return None
    match = _SCORE.search(status_text)
    if not match:
        return None
    return Score(int(match.group(1)), int(match.group(2)))


def is_completed(
    score: Optional[Score],
    kickoff: Optional[datetime],
    *,
    elapsed_fallback: bool = False,
    now: Optional[datetime] = None,
) -> bool:
    """Decide whether a match is finished.

    A score is the primary signal. Sources without a reliable status column
    may enable *elapsed_fallback*, which treats any match whose kickoff lies
    in the past as completed. That fallback also marks postponed matches as
    completed; the source gives no way to tell them apart.
    """

    if score is not None:
        return True
    if not elapsed_fallback or kickoff is None:
        return False
    return kickoff < (now or datetime.now())
