"""Youth-hockey match and standings importer.

This script downloads the fixture and standings pages of the Ústí region
league sites, keeps the matches of HC Slovan Ústí nad Labem, and writes them
in the goalie tracker's import format.  The JSON output can be pasted into the
application's JSON import; an optional Excel workbook gives a quick overview
with one sheet of matches and one of standings.

Usage
-----
python main.py --season 2025-2026 --category starsi-zaci-a --output import.json

Without arguments the current season is imported for every category.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from hokej import config
from hokej.models import CanonicalMatch, CompetitionStandings, ImportResult
from hokej.service import ImportRequestError, resolve_category, resolve_profile, run_import, validate_season
from hokej.sources import PROFILES

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("data") / "scraped-matches.json"


# -------------------------
# Output helpers
# -------------------------

def matches_to_frame(matches: Iterable[CanonicalMatch]) -> pd.DataFrame:
    records = [
        {
            "external_id": match.external_id,
            "datetime": match.datetime,
            "category": match.category,
            "home": match.home,
            "away": match.away,
            "home_score": match.home_score,
            "away_score": match.away_score,
            "venue": match.venue,
            "status": match.status,
        }
        for match in matches
    ]
    return pd.DataFrame.from_records(records)


def standings_to_frame(standings: Iterable[CompetitionStandings]) -> pd.DataFrame:
    records = [
        {
            "competition": table.competition_name or table.competition_id,
            "position": row.position,
            "team": row.team_name,
            "games": row.games_played,
            "wins": row.wins,
            "wins_ot": row.wins_ot,
            "draws": row.draws,
            "losses_ot": row.losses_ot,
            "losses": row.losses,
            "goals_for": row.goals_for,
            "goals_against": row.goals_against,
            "goal_difference": row.goal_difference,
            "points": row.points,
            "our_team": row.is_our_team,
        }
        for table in standings
        for row in table.rows
    ]
    return pd.DataFrame.from_records(records)


def write_excel(result: ImportResult, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        matches_to_frame(result.matches).to_excel(writer, sheet_name="matches", index=False)
        standings_to_frame(result.standings).to_excel(writer, sheet_name="standings", index=False)


def write_json(payload: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def run(
    season: Optional[str],
    output_path: Path,
    *,
    category: Optional[str] = None,
    profile: Optional[str] = None,
    excel_path: Optional[Path] = None,
    with_standings: bool = True,
    timeout: float = config.DEFAULT_TIMEOUT,
    debug_dir: Optional[Path] = config.DEBUG_DIR,
    **options: Any,
) -> Dict[str, Any]:
    """Run one import and write its payload; returns the payload."""

    result = asyncio.run(
        run_import(
            validate_season(season),
            resolve_category(category),
            profile=resolve_profile(profile),
            timeout=timeout,
            debug_dir=debug_dir,
            with_standings=with_standings,
            **options,
        )
    )
    payload = result.to_dict()
    write_json(payload, output_path)
    logger.info("Wrote %s", output_path.resolve())
    if excel_path is not None:
        write_excel(result, excel_path)
        logger.info("Wrote %s", excel_path.resolve())
    return payload


# -------------------------
# CLI entry-point
# -------------------------

def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--season",
        default=config.DEFAULT_SEASON,
        help=f"Season to import as YYYY-YYYY (default: {config.DEFAULT_SEASON}).",
    )
    parser.add_argument(
        "--category",
        help="Only import one category, e.g. starsi-zaci-a.",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        default=config.DEFAULT_PROFILE,
        help="League site to scrape.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"JSON file to write (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--excel",
        type=Path,
        help="Optional Excel workbook with matches and standings.",
    )
    parser.add_argument(
        "--no-standings",
        action="store_true",
        help="Skip downloading standings tables.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=config.DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds.",
    )
    parser.add_argument(
        "--debug-dir",
        type=Path,
        default=config.DEBUG_DIR,
        help="Where to save pages that yielded no table rows.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging for detailed progress information.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output, showing only warnings and errors.",
    )

    args = parser.parse_args(argv)

    if args.verbose and args.quiet:
        parser.error("--verbose and --quiet are mutually exclusive")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        payload = run(
            args.season,
            args.output,
            category=args.category,
            profile=args.profile,
            excel_path=args.excel,
            with_standings=not args.no_standings,
            timeout=args.timeout,
            debug_dir=args.debug_dir,
        )
    except ImportRequestError as exc:
        raise SystemExit(f"Invalid import request: {exc}") from exc

    if not payload["matches"]:
        logger.warning("No matches found; check the saved debug pages in %s", args.debug_dir)
    logger.info(
        "%d matches (%d completed, %d upcoming)",
        payload["totalCount"],
        payload["completedCount"],
        payload["upcomingCount"],
    )


if __name__ == "__main__":
    main()
