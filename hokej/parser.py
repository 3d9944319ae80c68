"""HTML table extraction utilities."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup

Row = Tuple[str, ...]

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ColumnMap:
    """Positional cell indexes of the match fields for one source layout.

    ``None`` marks a field the source does not publish.
    """

    date: int
    home: int
    away: int
    time: Optional[int] = None
    venue: Optional[int] = None
    competition: Optional[int] = None
    round: Optional[int] = None
    match_number: Optional[int] = None
    status: Optional[int] = None


def normalise_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.replace("\xa0", " ")).strip()


def cell(row: Row, index: Optional[int]) -> str:
    """Return the cell at *index*, or an empty string when it is missing."""

    if index is None or index >= len(row):
        return ""
    return row[index]


def parse_int(raw: Optional[str], default: int = 0) -> int:
    if raw is None:
        return default
    text = raw.strip().replace("−", "-").replace("\xa0", "").replace(" ", "")
    match = re.match(r"^-?\d+", text)
    if not match:
        return default
    return int(match.group(0))


def _soup(html: Optional[str]) -> Optional[BeautifulSoup]:
    if not html or not html.strip():
        return None
    return BeautifulSoup(html, "lxml")


def iter_table_rows(html: Optional[str], row_selector: str, *, min_cells: int) -> Iterator[Row]:
    """Yield the cell texts of every row matched by *row_selector*.

    Rows with fewer than *min_cells* ``td`` cells are header or decoration
    rows and are skipped. A document without matching rows yields nothing.
    """

    doc = _soup(html)
    if doc is None:
        return
    for tr in doc.select(row_selector):
        cells = tr.find_all("td")
        if len(cells) < min_cells:
            continue
        yield tuple(normalise_text(td.get_text(" ")) for td in cells)


def table_headers(html: Optional[str], header_selector: str) -> List[str]:
    """Return the normalised header texts of the first header row found."""

    doc = _soup(html)
    if doc is None:
        return []
    for tr in doc.select(header_selector):
        headers = [normalise_text(th.get_text(" ")) for th in tr.find_all(["th", "td"])]
        if any(headers):
            return headers
    return []
