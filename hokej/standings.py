"""Standings table parsing with column-layout detection."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from .matching import is_our_standings_team
from .models import CompetitionStandings, StandingsRow
from .parser import Row, cell, parse_int

logger = logging.getLogger(__name__)

_GOALS = re.compile(r"(\d+)\s*[:\-]\s*(\d+)")
_OVERTIME_HEADERS = {"vp", "pp", "otw", "otl", "sow", "sol"}

MIN_STANDINGS_CELLS = 8


@dataclass(frozen=True)
class StandingsLayout:
    """Column indexes of one standings table layout.

    Goals are either one combined ``F:A`` cell (``score``) or two cells
    (``goals_for``/``goals_against``).
    """

    name: str
    games: int
    wins: int
    losses: int
    points: int
    draws: Optional[int] = None
    wins_ot: Optional[int] = None
    losses_ot: Optional[int] = None
    score: Optional[int] = None
    goals_for: Optional[int] = None
    goals_against: Optional[int] = None

    @property
    def has_overtime(self) -> bool:
        return self.wins_ot is not None


# Poř., Tým, Z, V, VP, R, PP, P, Skóre, B. The draws column stays empty in
# leagues that play overtime, so it is not carried over.
OVERTIME_FULL = StandingsLayout(
    name="overtime-full", games=2, wins=3, wins_ot=4, losses_ot=6, losses=7, score=8, points=9
)
# Poř., Tým, Z, V, VP, PP, P, Skóre, B
OVERTIME = StandingsLayout(
    name="overtime", games=2, wins=3, wins_ot=4, losses_ot=5, losses=6, score=7, points=8
)
# Poř., Tým, Z, V, R, P, Skóre, B
DRAWS = StandingsLayout(
    name="draws", games=2, wins=3, draws=4, losses=5, score=6, points=7
)
# Poř., Tým, Z, V, R, P, Skóre, +/-, B
DRAWS_WITH_DIFFERENCE = StandingsLayout(
    name="draws-with-difference", games=2, wins=3, draws=4, losses=5, score=6, points=8
)
# Poř., Tým, Z, V, R, P, VG, OG, B
DRAWS_SPLIT_GOALS = StandingsLayout(
    name="draws-split-goals",
    games=2,
    wins=3,
    draws=4,
    losses=5,
    goals_for=6,
    goals_against=7,
    points=8,
)

LAYOUTS: Tuple[StandingsLayout, ...] = (
    OVERTIME_FULL,
    OVERTIME,
    DRAWS,
    DRAWS_WITH_DIFFERENCE,
    DRAWS_SPLIT_GOALS,
)


def _has_overtime_headers(headers: Sequence[str]) -> bool:
    return any(header.strip(" .").lower() in _OVERTIME_HEADERS for header in headers)


def _typical_width(rows: Sequence[Row]) -> int:
    widths = [len(row) for row in rows]
    return max(set(widths), key=widths.count)


def _mostly_combined(rows: Sequence[Row], index: int) -> bool:
    combined = sum(1 for row in rows if _GOALS.search(cell(row, index)))
    return combined * 2 > len(rows)


def detect_layout(rows: Sequence[Row], headers: Sequence[str] = ()) -> StandingsLayout:
    """Pick the layout matching *rows*.

    Header labels decide first when they name overtime columns. Otherwise the
    cell count decides. A nine-cell table is overtime when its eighth cell
    holds a combined ``F:A`` score, has a goal difference column when the
    seventh cell does, and has separate goal columns otherwise.
    """

    width = _typical_width(rows) if rows else 0
    if width >= 10:
        return OVERTIME_FULL
    if width == 9:
        if _has_overtime_headers(headers):
            return OVERTIME
        if _mostly_combined(rows, 7):
            return OVERTIME
        if _mostly_combined(rows, 6):
            return DRAWS_WITH_DIFFERENCE
        return DRAWS_SPLIT_GOALS
    if _has_overtime_headers(headers):
        logger.warning("Overtime headers on a %d-column table; reading it without overtime", width)
    return DRAWS


def _goals(row: Row, layout: StandingsLayout) -> Tuple[int, int]:
    # A combined "F:A" cell wins even where separate goal columns are expected.
    first = layout.score if layout.score is not None else layout.goals_for
    match = _GOALS.search(cell(row, first))
    if match:
        return int(match.group(1)), int(match.group(2))
    if layout.score is not None:
        return parse_int(cell(row, layout.score)), parse_int(cell(row, layout.score + 1))
    return parse_int(cell(row, layout.goals_for)), parse_int(cell(row, layout.goals_against))


def _position(raw: str, fallback: int) -> Tuple[int, bool]:
    value = parse_int(raw, default=0)
    if value <= 0:
        return fallback, False
    return value, True


def parse_standings_table(
    rows: Iterable[Row],
    headers: Sequence[str] = (),
    *,
    min_cells: int = MIN_STANDINGS_CELLS,
) -> List[StandingsRow]:
    """Convert standings table rows into ranked :class:`StandingsRow` entries."""

    usable = [row for row in rows if len(row) >= min_cells]
    if not usable:
        return []
    layout = detect_layout(usable, headers)
    logger.debug("Standings layout %s for %d rows", layout.name, len(usable))

    parsed: List[StandingsRow] = []
    trusted = True
    for index, row in enumerate(usable, start=1):
        team_name = cell(row, 1)
        if not team_name:
            continue
        position, from_source = _position(cell(row, 0), index)
        trusted = trusted and from_source
        goals_for, goals_against = _goals(row, layout)
        optional = (
            {
                "wins_ot": parse_int(cell(row, layout.wins_ot)),
                "losses_ot": parse_int(cell(row, layout.losses_ot)),
            }
            if layout.has_overtime
            else {"draws": parse_int(cell(row, layout.draws))}
        )
        parsed.append(
            StandingsRow(
                position=position,
                team_name=team_name,
                games_played=parse_int(cell(row, layout.games)),
                wins=parse_int(cell(row, layout.wins)),
                losses=parse_int(cell(row, layout.losses)),
                goals_for=goals_for,
                goals_against=goals_against,
                points=parse_int(cell(row, layout.points)),
                is_our_team=is_our_standings_team(team_name),
                **optional,
            )
        )

    parsed.sort(key=lambda entry: entry.position)
    positions = [entry.position for entry in parsed]
    if not trusted or len(set(positions)) != len(positions):
        parsed = [
            replace(entry, position=rank)
            for rank, entry in enumerate(parsed, start=1)
        ]
    return parsed


def build_competition_standings(
    rows: Iterable[Row],
    headers: Sequence[str],
    *,
    competition_id: str,
    competition_key: str,
    season: str,
    competition_name: Optional[str] = None,
    min_cells: int = MIN_STANDINGS_CELLS,
    captured_at: Optional[datetime] = None,
) -> Optional[CompetitionStandings]:
    """Wrap parsed rows; ``None`` means the standings are unavailable."""

    parsed = parse_standings_table(rows, headers, min_cells=min_cells)
    if not parsed:
        return None
    return CompetitionStandings(
        id=f"standings-{competition_id}-{season}",
        competition_id=competition_key,
        competition_name=competition_name,
        season_id=season,
        external_competition_id=competition_id,
        updated_at=captured_at or datetime.now(),
        rows=tuple(parsed),
    )
