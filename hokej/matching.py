"""Team identity and competition category matching.

Both matchers are plain containment checks against hand-maintained lists.
A name or label that is not recognised is a gap in the lists below, so new
spellings are added here rather than handled with extra logic.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

_WHITESPACE = re.compile(r"\s+")
_QUOTES = re.compile(r"[\"'„“”‚‘’»«]")

# Spellings of HC Slovan Ústí nad Labem seen on league sites.
TRACKED_CLUB_VARIANTS: Tuple[str, ...] = (
    "slovan ústí",
    "slovan usti",
    "hc slovan ústí",
    "hc slovan usti",
    "slovan ústí b",
    "slovan usti b",
    "slovan ústí n.l.",
    "slovan usti n.l.",
    "slovan ústí n. l.",
    "slovan usti n. l.",
    "slovan ú.n.l.",
    "slovan u.n.l.",
    "ústečtí lvi",
    "ustecti lvi",
)

# Standings only look for the town; there is a single club from it per table.
STANDINGS_CLUB_TERMS: Tuple[str, ...] = ("ústí", "usti")


def normalise_name(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.lower()).strip()


def contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)


def is_tracked_club(name: Optional[str]) -> bool:
    return contains_any(normalise_name(name), TRACKED_CLUB_VARIANTS)


def is_our_standings_team(name: Optional[str]) -> bool:
    """Looser check used for highlighting a standings row."""

    return contains_any(normalise_name(name), STANDINGS_CLUB_TERMS)


def slugify(text: str) -> str:
    nfkd = unicodedata.normalize("NFKD", text)
    ascii_text = "".join(c for c in nfkd if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")


@dataclass(frozen=True)
class Category:
    code: str
    display_name: str
    short_code: str
    league_name: str
    aliases: Tuple[str, ...]


# Declaration order is the match priority. The "B" groups come first and carry
# only letter-specific aliases; the bare age aliases sit on the "A" groups so
# an unlettered label lands in the main group.
CATEGORIES: Tuple[Category, ...] = (
    Category(
        code="starsi-zaci-b",
        display_name="Starší žáci B",
        short_code="Z7",
        league_name='Liga starších žáků "B" sk. 10',
        aliases=("starších žáků b", "starší žáci b", "starsi zaci b", "st. žáci b", "lsž b", "z7"),
    ),
    Category(
        code="starsi-zaci-a",
        display_name="Starší žáci A",
        short_code="Z8",
        league_name='Liga starších žáků "A" sk. 2',
        aliases=(
            "starších žáků a",
            "starší žáci a",
            "st. žáci a",
            "lsž a",
            "z8",
            "starších žáků",
            "starší žáci",
            "starsi zaci",
        ),
    ),
    Category(
        code="mladsi-zaci-b",
        display_name="Mladší žáci B",
        short_code="Z5",
        league_name='Liga mladších žáků "B" sk. 14',
        aliases=("mladších žáků b", "mladší žáci b", "mladsi zaci b", "ml. žáci b", "lmž b", "z5"),
    ),
    Category(
        code="mladsi-zaci-a",
        display_name="Mladší žáci A",
        short_code="Z6",
        league_name='Liga mladších žáků "A" sk. 4',
        aliases=(
            "mladších žáků a",
            "mladší žáci a",
            "ml. žáci a",
            "lmž a",
            "z6",
            "mladších žáků",
            "mladší žáci",
            "mladsi zaci",
        ),
    ),
)

_BY_CODE = {category.code: category for category in CATEGORIES}


def normalise_label(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WHITESPACE.sub(" ", _QUOTES.sub("", text.lower())).strip()


def classify(text: Optional[str]) -> Optional[Category]:
    """Return the first category whose aliases occur in *text*."""

    label = normalise_label(text)
    if not label:
        return None
    for category in CATEGORIES:
        if contains_any(label, category.aliases):
            return category
    return None


def get_category(code: Optional[str]) -> Optional[Category]:
    """Resolve a category code; ``None`` for a missing code, ``KeyError`` for an unknown one."""

    if not code:
        return None
    try:
        return _BY_CODE[code]
    except KeyError:
        raise KeyError(f"Unknown category {code!r}") from None
