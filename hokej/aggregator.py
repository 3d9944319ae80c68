"""Assembly of scraped matches into canonical match records."""
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .models import CanonicalMatch, ManualStats, ScrapedMatch


def deduplicate(matches: Iterable[ScrapedMatch]) -> List[ScrapedMatch]:
    """Collapse matches sharing an external id; the last one seen wins."""

    bucket: Dict[str, ScrapedMatch] = {}
    for match in matches:
        bucket[match.external_id] = match
    return list(bucket.values())


def to_canonical(match: ScrapedMatch, *, season: str, source: str) -> CanonicalMatch:
    return CanonicalMatch(
        id=f"imported-{match.external_id}",
        external_id=match.external_id,
        home=match.home,
        away=match.away,
        home_score=match.home_score,
        away_score=match.away_score,
        datetime=match.datetime,
        venue=match.venue,
        category=match.category,
        source=source,
        season_id=season,
        status="completed" if match.completed else "scheduled",
        completed=match.completed,
        manual_stats=ManualStats() if match.completed else None,
    )


def assemble_matches(
    matches: Iterable[ScrapedMatch], *, season: str, source: str
) -> List[CanonicalMatch]:
    canonical = [
        to_canonical(match, season=season, source=source) for match in deduplicate(matches)
    ]
    canonical.sort(key=lambda match: match.datetime)
    return canonical


def count_matches(matches: Iterable[CanonicalMatch]) -> Tuple[int, int, int]:
    """Return ``(total, completed, upcoming)``."""

    items = list(matches)
    completed = sum(1 for match in items if match.completed)
    return len(items), completed, len(items) - completed
