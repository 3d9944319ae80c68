"""Import entry points used by the web layer and the command line."""
from __future__ import annotations

import logging
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from . import config
from .aggregator import assemble_matches, count_matches
from .matching import CATEGORIES, Category, get_category
from .models import ImportResult
from .scraper import client_scope, gather_or_cancel, scrape_matches, scrape_standings
from .sources import SourceProfile, get_profile

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, Any]]

_SEASON = re.compile(r"^(\d{4})-(\d{4})$")


class ImportRequestError(ValueError):
    """Raised when import parameters are malformed."""


def validate_season(season: Optional[str]) -> str:
    if not season:
        return config.DEFAULT_SEASON
    season = season.strip()
    match = _SEASON.match(season)
    if not match or int(match.group(2)) != int(match.group(1)) + 1:
        raise ImportRequestError(f"Season must look like YYYY-YYYY, got {season!r}")
    return season


def resolve_category(code: Optional[str]) -> Optional[Category]:
    try:
        return get_category(code)
    except KeyError as exc:
        raise ImportRequestError(str(exc.args[0])) from exc


def resolve_profile(name: Optional[str]) -> SourceProfile:
    try:
        return get_profile(name or config.DEFAULT_PROFILE)
    except KeyError as exc:
        raise ImportRequestError(str(exc.args[0])) from exc


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def run_import(
    season: str,
    category: Optional[Category] = None,
    *,
    profile: Optional[SourceProfile] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = config.DEFAULT_TIMEOUT,
    debug_dir: Optional[Path] = config.DEBUG_DIR,
    with_standings: bool = True,
    now: Optional[datetime] = None,
) -> ImportResult:
    """Scrape matches (and standings) for *season* and build canonical records."""

    profile = profile or resolve_profile(None)
    start = time.monotonic()
    async with client_scope(client, timeout) as http:
        jobs = [
            scrape_matches(
                profile, season, category, client=http, timeout=timeout, debug_dir=debug_dir, now=now
            )
        ]
        if with_standings:
            jobs.append(
                scrape_standings(
                    profile, season, category, client=http, timeout=timeout, debug_dir=debug_dir
                )
            )
        results = await gather_or_cancel(*jobs)

    scraped = results[0]
    standings = results[1] if with_standings else ()
    matches = assemble_matches(scraped, season=season, source=profile.source)
    total, completed, upcoming = count_matches(matches)
    elapsed = _elapsed_ms(start)
    logger.info(
        "Imported %d match(es) (%d completed, %d upcoming) and %d standings table(s) in %d ms",
        total,
        completed,
        upcoming,
        len(standings),
        elapsed,
    )
    if not scraped:
        logger.warning("No matches found for %s (%s)", season, category.code if category else "all")
    return ImportResult(matches=tuple(matches), standings=tuple(standings), elapsed=elapsed)


def _error(status: int, error: str, details: str) -> Response:
    return status, {"error": error, "details": details}


async def handle_import(body: Any, **options: Any) -> Response:
    """Handle an import request body ``{season?, category?, source?}``.

    Returns an HTTP status code and the JSON payload. Malformed requests give
    400, anything unexpected 500 with the exception text.
    """

    try:
        if body is None:
            body = {}
        if not isinstance(body, Mapping):
            raise ImportRequestError("Request body must be a JSON object")
        season = validate_season(body.get("season"))
        category = resolve_category(body.get("category"))
        profile = resolve_profile(body.get("source"))
    except ImportRequestError as exc:
        logger.warning("Rejected import request: %s", exc)
        return _error(400, "Invalid import request", str(exc))

    try:
        result = await run_import(season, category, profile=profile, **options)
    except Exception as exc:
        logger.exception("Import failed")
        return _error(500, "Import failed", str(exc))
    return 200, result.to_dict()


async def handle_import_query(params: Mapping[str, str], **options: Any) -> Response:
    """Query-string variant of :func:`handle_import`."""

    body = {key: params.get(key) for key in ("season", "category", "source") if params.get(key)}
    return await handle_import(body, **options)


async def handle_standings(params: Mapping[str, str], **options: Any) -> Response:
    """Return standings for one category, or for every competition of the source."""

    start = time.monotonic()
    try:
        season = validate_season(params.get("season"))
        code = params.get("category") or params.get("competitionId")
        category = resolve_category(code)
        profile = resolve_profile(params.get("source"))
    except ImportRequestError as exc:
        logger.warning("Rejected standings request: %s", exc)
        return _error(400, "Invalid standings request", str(exc))

    try:
        standings = await scrape_standings(profile, season, category, **options)
    except Exception as exc:
        logger.exception("Standings fetch failed")
        return _error(500, "Failed to fetch standings", str(exc))

    if category is not None:
        if not standings:
            return 404, {"error": "Standings not found", "competitionId": code, "season": season}
        return 200, {
            "success": True,
            "standings": standings[0].to_dict(),
            "elapsed": _elapsed_ms(start),
        }
    return 200, {
        "success": True,
        "standings": [item.to_dict() for item in standings],
        "competitions": [
            {"code": item.code, "name": item.league_name, "display": item.display_name}
            for item in CATEGORIES
        ],
        "elapsed": _elapsed_ms(start),
    }
