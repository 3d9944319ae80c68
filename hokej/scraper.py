"""Downloading league pages and turning their tables into scraped records."""
from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

import httpx

from . import config
from .dates import parse_date_range
from .matching import Category, classify, slugify
from .models import CompetitionStandings, ScrapedMatch
from .parser import Row, cell, iter_table_rows, table_headers
from .scores import is_completed
from .sources import FetchRequest, SourceProfile
from .standings import build_competition_standings

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -------------------------
# HTTP helpers
# -------------------------

def build_client(
    timeout: float = config.DEFAULT_TIMEOUT,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return an async client identifying itself with a descriptive user agent."""

    return httpx.AsyncClient(
        headers={
            "User-Agent": config.USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
        },
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


@contextlib.asynccontextmanager
async def client_scope(
    client: Optional[httpx.AsyncClient], timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Use *client* as given, or open a temporary one closed on exit."""

    if client is not None:
        yield client
        return
    async with build_client(timeout) as owned:
        yield owned


async def fetch_html(client: httpx.AsyncClient, url: str, *, timeout: float) -> Optional[str]:
    """Download *url*; ``None`` when it times out, fails or answers non-2xx."""

    try:
        response = await asyncio.wait_for(client.get(url), timeout)
        response.raise_for_status()
    except asyncio.TimeoutError:
        logger.warning("Timed out after %.1fs fetching %s", timeout, url)
        return None
    except httpx.HTTPError as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None
    logger.debug("Fetched %s (%d bytes)", url, len(response.content))
    return response.text


async def gather_or_cancel(*jobs: Awaitable[T]) -> List[T]:
    """Await *jobs* concurrently; when one raises, cancel the rest before re-raising."""

    tasks = [asyncio.ensure_future(job) for job in jobs]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for pending in tasks:
            pending.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def fetch_all(
    requests: Sequence[FetchRequest],
    task: Callable[[FetchRequest], Awaitable[T]],
) -> List[T]:
    """Run *task* for every request concurrently and return results in request order."""

    return await gather_or_cancel(*(task(request) for request in requests))


def write_debug_html(debug_dir: Optional[Path], name: str, html: str) -> Optional[Path]:
    """Keep *html* for offline inspection; failures are logged, never raised."""

    if debug_dir is None:
        return None
    path = debug_dir / f"debug-{slugify(name)}.html"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write debug HTML to %s: %s", path, exc)
        return None
    logger.info("No table rows found; saved page to %s", path)
    return path


# -------------------------
# Row parsing
# -------------------------

def _category_for(row: Row, profile: SourceProfile, request: FetchRequest) -> Tuple[Optional[Category], str]:
    label = cell(row, profile.columns.competition)
    if label:
        return classify(label), label
    category = request.category
    return category, category.display_name if category else ""


def _external_id_base(
    row: Row,
    profile: SourceProfile,
    request: FetchRequest,
    category: Optional[Category],
    label: str,
    index: int,
) -> str:
    prefix = request.competition_id or (category.code if category else label) or profile.name
    number = cell(row, profile.columns.match_number)
    if number:
        return slugify(f"{prefix}-{number}")
    round_no = cell(row, profile.columns.round) or (str(request.round) if request.round else "")
    return slugify(f"{prefix}-{round_no}-{index}")


def parse_match_rows(
    rows: Iterable[Row],
    profile: SourceProfile,
    request: FetchRequest,
    *,
    expected: Optional[Category] = None,
    now: Optional[datetime] = None,
) -> Tuple[ScrapedMatch, ...]:
    """Turn table rows into matches of the tracked club.

    Rows without both teams or a readable date are skipped, as are rows whose
    category differs from *expected*. A row listing a date range yields one
    match per date.
    """

    columns = profile.columns
    matches: List[ScrapedMatch] = []
    for index, row in enumerate(rows):
        home, away = cell(row, columns.home), cell(row, columns.away)
        if not home or not away:
            continue
        if not (profile.is_tracked_club(home) or profile.is_tracked_club(away)):
            continue

        category, label = _category_for(row, profile, request)
        if expected is not None and category != expected:
            logger.debug("Dropping %s - %s: category %r is not %s", home, away, label, expected.code)
            continue

        time_index = columns.time if columns.time is not None else columns.date
        stamps = parse_date_range(cell(row, columns.date), cell(row, time_index))
        if not stamps:
            continue

        status_text = cell(row, columns.status)
        score = profile.parse_score(status_text)
        base_id = _external_id_base(row, profile, request, category, label, index)
        for sequence, stamp in enumerate(stamps, start=1):
            matches.append(
                ScrapedMatch(
                    external_id=base_id if len(stamps) == 1 else f"{base_id}-{sequence}",
                    home=home,
                    away=away,
                    home_score=score.home if score else None,
                    away_score=score.away if score else None,
                    datetime=stamp,
                    venue=cell(row, columns.venue) or None,
                    category=category.display_name if category else label,
                    completed=is_completed(
                        score,
                        stamp,
                        elapsed_fallback=profile.elapsed_implies_completed,
                        now=now,
                    ),
                    status_text=status_text or None,
                )
            )
    return tuple(matches)


# -------------------------
# Pipelines
# -------------------------

async def scrape_matches(
    profile: SourceProfile,
    season: str,
    category: Optional[Category] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = config.DEFAULT_TIMEOUT,
    debug_dir: Optional[Path] = config.DEBUG_DIR,
    now: Optional[datetime] = None,
) -> Tuple[ScrapedMatch, ...]:
    """Fetch every match page of *profile* and return the tracked club's matches."""

    requests = profile.match_requests(season, category)
    logger.info("Fetching %d %s match page(s) for %s", len(requests), profile.name, season)

    async with client_scope(client, timeout) as http:

        async def run(request: FetchRequest) -> Tuple[ScrapedMatch, ...]:
            html = await fetch_html(http, request.url, timeout=timeout)
            if html is None:
                return ()
            rows = list(iter_table_rows(html, profile.row_selector, min_cells=profile.min_cells))
            if not rows:
                write_debug_html(debug_dir, f"{profile.name}-{request.label}", html)
                return ()
            found = parse_match_rows(rows, profile, request, expected=category, now=now)
            logger.debug("%s: %d row(s), %d match(es)", request.label, len(rows), len(found))
            return found

        results = await fetch_all(requests, run)

    matches = tuple(itertools.chain.from_iterable(results))
    logger.info("Scraped %d match record(s) from %s", len(matches), profile.name)
    return matches


async def scrape_standings(
    profile: SourceProfile,
    season: str,
    category: Optional[Category] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = config.DEFAULT_TIMEOUT,
    debug_dir: Optional[Path] = config.DEBUG_DIR,
    captured_at: Optional[datetime] = None,
) -> Tuple[CompetitionStandings, ...]:
    """Fetch the standings of every competition of *profile*; unavailable ones are left out."""

    if profile.standings_requests is None:
        return ()
    requests = profile.standings_requests(season, category)
    logger.info("Fetching %d %s standings page(s) for %s", len(requests), profile.name, season)

    async with client_scope(client, timeout) as http:

        async def run(request: FetchRequest) -> Optional[CompetitionStandings]:
            html = await fetch_html(http, request.url, timeout=timeout)
            if html is None:
                return None
            rows = list(
                iter_table_rows(
                    html, profile.standings_row_selector, min_cells=profile.standings_min_cells
                )
            )
            if not rows:
                write_debug_html(debug_dir, f"{profile.name}-{request.label}", html)
                return None
            standings = build_competition_standings(
                rows,
                table_headers(html, profile.standings_header_selector),
                competition_id=request.competition_id or request.label,
                competition_key=request.competition_key or request.label,
                season=season,
                competition_name=request.competition_name,
                min_cells=profile.standings_min_cells,
                captured_at=captured_at,
            )
            if standings is None:
                logger.warning("Standings unavailable for %s", request.label)
            return standings

        results = await fetch_all(requests, run)

    return tuple(standings for standings in results if standings is not None)
