"""Toolkit for importing youth-hockey matches and standings from league websites."""

from .models import CanonicalMatch, CompetitionStandings, ImportResult, ScrapedMatch, StandingsRow
from .aggregator import assemble_matches, deduplicate
from .dates import parse_date_range, parse_date_time
from .matching import classify, is_tracked_club
from .scores import parse_score
from .service import ImportRequestError, handle_import, handle_import_query, handle_standings, run_import
from .sources import PROFILES, SourceProfile, get_profile

__all__ = [
    "CanonicalMatch",
    "CompetitionStandings",
    "ImportRequestError",
    "ImportResult",
    "PROFILES",
    "ScrapedMatch",
    "SourceProfile",
    "StandingsRow",
    "assemble_matches",
    "classify",
    "deduplicate",
    "get_profile",
    "handle_import",
    "handle_import_query",
    "handle_standings",
    "is_tracked_club",
    "parse_date_range",
    "parse_date_time",
    "parse_score",
    "run_import",
]
