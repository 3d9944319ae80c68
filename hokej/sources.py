"""Per-site source profiles.

A :class:`SourceProfile` bundles everything that differs between league
websites: how request URLs are built, where each field sits in a table row,
and which matching rules apply. The scraping pipeline in :mod:`hokej.scraper`
only ever talks to a profile, so supporting another site means adding a
profile here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from . import config
from .matching import CATEGORIES, Category, is_tracked_club
from .parser import ColumnMap
from .scores import Score, parse_score


@dataclass(frozen=True)
class FetchRequest:
    """One URL to download together with what is already known about it."""

    url: str
    label: str
    category: Optional[Category] = None
    competition_id: Optional[str] = None
    competition_key: Optional[str] = None
    competition_name: Optional[str] = None
    round: Optional[int] = None


RequestBuilder = Callable[[str, Optional[Category]], List[FetchRequest]]


@dataclass(frozen=True)
class SourceProfile:
    name: str
    source: str
    row_selector: str
    min_cells: int
    columns: ColumnMap
    match_requests: RequestBuilder
    standings_requests: Optional[RequestBuilder] = None
    standings_row_selector: str = "table.table tbody tr"
    standings_header_selector: str = "table.table thead tr"
    standings_min_cells: int = 8
    parse_score: Callable[[Optional[str]], Optional[Score]] = parse_score
    is_tracked_club: Callable[[Optional[str]], bool] = is_tracked_club
    elapsed_implies_completed: bool = False


def _selected(category: Optional[Category]) -> Tuple[Category, ...]:
    return (category,) if category is not None else CATEGORIES


# ---------- zapasy.ceskyhokej.cz: one filtered request per import

ZAPASY_URL = "https://zapasy.ceskyhokej.cz/zapasy"
CLUB_ID = "115"
REGION = "U"


def zapasy_match_requests(season: str, category: Optional[Category]) -> List[FetchRequest]:
    params = {"season": season, "team": CLUB_ID, "region": REGION}
    if category is not None:
        params["league"] = category.short_code
    url = f"{ZAPASY_URL}?{urlencode(params)}"
    label = f"{season}-{category.code if category else 'all'}"
    return [FetchRequest(url=url, label=label, category=category)]


SLOVANUSTI_STANDINGS_URL = "https://slovanusti.cz/standings"


def slovanusti_standings_requests(season: str, category: Optional[Category]) -> List[FetchRequest]:
    # The club site keys seasons by the year they end in.
    year = season.split("-")[-1]
    requests = []
    for item in _selected(category):
        query = urlencode({"season": year, "category": item.short_code})
        requests.append(
            FetchRequest(
                url=f"{SLOVANUSTI_STANDINGS_URL}?{query}",
                label=f"standings-{item.short_code}",
                category=item,
                competition_id=item.short_code,
                competition_key=item.short_code,
                competition_name=item.league_name,
            )
        )
    return requests


ZAPASY_PROFILE = SourceProfile(
    name="zapasy",
    source="ceskyhokej",
    row_selector="table tbody tr",
    min_cells=10,
    # checkbox, blank, date, time, venue, competition, round, number, home, away, status
    columns=ColumnMap(
        date=2,
        time=3,
        venue=4,
        competition=5,
        round=6,
        match_number=7,
        home=8,
        away=9,
        status=10,
    ),
    match_requests=zapasy_match_requests,
    standings_requests=slovanusti_standings_requests,
    standings_row_selector="table tbody tr",
    standings_header_selector="table thead tr",
)


# ---------- ustecky.ceskyhokej.cz: one request per competition and round

USTECKY_BASE = "https://ustecky.ceskyhokej.cz"

# Competition ids change every season.
USTECKY_COMPETITIONS: Dict[str, Dict[str, str]] = {
    "2025-2026": {
        "starsi-zaci-a": "1860",
        "starsi-zaci-b": "1872",
        "mladsi-zaci-a": "1884",
        "mladsi-zaci-b": "1894",
    },
    "2024-2025": {
        "starsi-zaci-a": "1696",
        "starsi-zaci-b": "1706",
        "mladsi-zaci-a": "1718",
        "mladsi-zaci-b": "1727",
    },
}
USTECKY_FALLBACK_SEASON = "2025-2026"


def ustecky_competitions(season: str, category: Optional[Category]) -> List[Tuple[Category, str]]:
    ids = USTECKY_COMPETITIONS.get(season) or USTECKY_COMPETITIONS[USTECKY_FALLBACK_SEASON]
    return [(item, ids[item.code]) for item in _selected(category) if item.code in ids]


def ustecky_match_requests(season: str, category: Optional[Category]) -> List[FetchRequest]:
    requests = []
    for item, competition_id in ustecky_competitions(season, category):
        for round_no in range(1, config.MAX_ROUNDS + 1):
            query = urlencode(
                {
                    "seasonFilter-filter-id": season,
                    "leagueFilter-filter-id": competition_id,
                    "roundFilter-filter-id": round_no,
                }
            )
            requests.append(
                FetchRequest(
                    url=f"{USTECKY_BASE}/rozpis-utkani-a-vysledky?{query}",
                    label=f"{competition_id}-round-{round_no}",
                    category=item,
                    competition_id=competition_id,
                    competition_key=f"comp-{competition_id}",
                    competition_name=item.league_name,
                    round=round_no,
                )
            )
    return requests


def ustecky_standings_requests(season: str, category: Optional[Category]) -> List[FetchRequest]:
    requests = []
    for item, competition_id in ustecky_competitions(season, category):
        query = urlencode(
            {"seasonFilter-filter-id": season, "leagueFilter-filter-id": competition_id}
        )
        requests.append(
            FetchRequest(
                url=f"{USTECKY_BASE}/tabulky?{query}",
                label=f"standings-{competition_id}",
                category=item,
                competition_id=competition_id,
                competition_key=f"comp-{competition_id}",
                competition_name=item.league_name,
            )
        )
    return requests


USTECKY_PROFILE = SourceProfile(
    name="ustecky",
    source="ceskyhokej",
    row_selector="table.table tbody tr",
    min_cells=6,
    # number, "DD.MM.YYYY HH:MM", home, score, separator, away
    columns=ColumnMap(match_number=0, date=1, home=2, status=3, away=5),
    match_requests=ustecky_match_requests,
    standings_requests=ustecky_standings_requests,
    # The round pages carry no reliable status column for unplayed matches.
    elapsed_implies_completed=True,
)


PROFILES: Dict[str, SourceProfile] = {
    profile.name: profile for profile in (ZAPASY_PROFILE, USTECKY_PROFILE)
}


def get_profile(name: str) -> SourceProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown source profile {name!r}") from None
