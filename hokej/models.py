"""Data models for imported matches and standings."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .dates import format_timestamp


def _prune(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class ScrapedMatch:
    """One candidate match extracted from a source table row."""

    external_id: str
    home: str
    away: str
    datetime: datetime
    category: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    venue: Optional[str] = None
    completed: bool = False
    status_text: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class ManualStats:
    """Placeholder per-goalie counters attached to completed matches."""

    shots: int = 0
    saves: int = 0
    goals: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"shots": self.shots, "saves": self.saves, "goals": self.goals}


@dataclass(frozen=True)
class CanonicalMatch:
    """Match in the application's storage schema."""

    id: str
    external_id: str
    home: str
    away: str
    datetime: datetime
    category: str
    source: str
    season_id: str
    status: str
    completed: bool
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    venue: Optional[str] = None
    match_type: str = "league"
    manual_stats: Optional[ManualStats] = None

    def to_dict(self) -> Dict[str, Any]:
        return _prune(
            {
                "id": self.id,
                "externalId": self.external_id,
                "home": self.home,
                "away": self.away,
                "homeScore": self.home_score,
                "awayScore": self.away_score,
                "datetime": format_timestamp(self.datetime),
                "venue": self.venue,
                "category": self.category,
                "matchType": self.match_type,
                "source": self.source,
                "seasonId": self.season_id,
                "status": self.status,
                "completed": self.completed,
                "manualStats": self.manual_stats.to_dict() if self.manual_stats else None,
            }
        )


@dataclass(frozen=True)
class StandingsRow:
    """Single team line of a competition table.

    ``draws`` is only set for tables without overtime columns, ``wins_ot`` and
    ``losses_ot`` only for tables that have them.
    """

    position: int
    team_name: str
    games_played: int
    wins: int
    losses: int
    goals_for: int
    goals_against: int
    points: int
    is_our_team: bool = False
    draws: Optional[int] = None
    wins_ot: Optional[int] = None
    losses_ot: Optional[int] = None

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def to_dict(self) -> Dict[str, Any]:
        return _prune(
            {
                "position": self.position,
                "teamName": self.team_name,
                "gamesPlayed": self.games_played,
                "wins": self.wins,
                "winsOT": self.wins_ot,
                "draws": self.draws,
                "lossesOT": self.losses_ot,
                "losses": self.losses,
                "goalsFor": self.goals_for,
                "goalsAgainst": self.goals_against,
                "goalDifference": self.goal_difference,
                "points": self.points,
                "isOurTeam": self.is_our_team,
            }
        )


@dataclass(frozen=True)
class CompetitionStandings:
    id: str
    competition_id: str
    season_id: str
    external_competition_id: str
    updated_at: datetime
    rows: Tuple[StandingsRow, ...]
    competition_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _prune(
            {
                "id": self.id,
                "competitionId": self.competition_id,
                "competitionName": self.competition_name,
                "seasonId": self.season_id,
                "externalCompetitionId": self.external_competition_id,
                "updatedAt": self.updated_at.isoformat(timespec="seconds"),
                "rows": [row.to_dict() for row in self.rows],
            }
        )


@dataclass(frozen=True)
class ImportResult:
    """Everything one import call produced."""

    matches: Tuple[CanonicalMatch, ...]
    standings: Tuple[CompetitionStandings, ...]
    elapsed: int

    @property
    def total_count(self) -> int:
        return len(self.matches)

    @property
    def completed_count(self) -> int:
        return sum(1 for match in self.matches if match.completed)

    @property
    def upcoming_count(self) -> int:
        return self.total_count - self.completed_count

    def to_dict(self) -> Dict[str, Any]:
        matches: List[Dict[str, Any]] = [match.to_dict() for match in self.matches]
        return {
            "success": True,
            "matches": matches,
            "standings": [standings.to_dict() for standings in self.standings],
            "totalCount": self.total_count,
            "completedCount": self.completed_count,
            "upcomingCount": self.upcoming_count,
            "elapsed": self.elapsed,
        }
