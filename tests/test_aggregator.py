from datetime import datetime

from hokej.aggregator import assemble_matches, count_matches, deduplicate, to_canonical
from hokej.models import ScrapedMatch


def make_match(external_id, day, *, home="HC Slovan Ústí", away="HC Most", score=None, category="Starší žáci A"):
    return ScrapedMatch(
        external_id=external_id,
        home=home,
        away=away,
        home_score=score[0] if score else None,
        away_score=score[1] if score else None,
        datetime=datetime(2026, 1, day, 10, 0),
        category=category,
        completed=score is not None,
    )


def test_duplicates_collapse_with_last_one_winning():
    first = make_match("1860-5", 10, away="HC Most")
    second = make_match("1860-5", 11, away="HC Most B", score=(4, 1))

    result = deduplicate([first, make_match("1860-6", 12), second])

    assert [match.external_id for match in result] == ["1860-5", "1860-6"]
    assert result[0] is second


def test_assemble_sorts_by_datetime_and_builds_canonical_records():
    matches = [
        make_match("c", 20),
        make_match("a", 3, score=(3, 2)),
        make_match("b", 11),
        make_match("a", 5, score=(5, 0)),
    ]

    canonical = assemble_matches(matches, season="2025-2026", source="ceskyhokej")

    assert [match.id for match in canonical] == ["imported-a", "imported-b", "imported-c"]
    first = canonical[0]
    assert first.home_score == 5
    assert first.datetime == datetime(2026, 1, 5, 10, 0)
    assert first.season_id == "2025-2026"
    assert first.source == "ceskyhokej"
    assert first.status == "completed"
    assert first.manual_stats is not None
    assert first.to_dict()["manualStats"] == {"shots": 0, "saves": 0, "goals": 0}


def test_scheduled_match_has_no_placeholder_stats():
    canonical = to_canonical(make_match("x", 9), season="2025-2026", source="ceskyhokej")

    assert canonical.status == "scheduled"
    assert canonical.manual_stats is None
    payload = canonical.to_dict()
    assert "manualStats" not in payload
    assert "homeScore" not in payload
    assert payload["datetime"] == "2026-01-09T10:00:00"
    assert payload["matchType"] == "league"


def test_assembly_is_idempotent():
    matches = [make_match(str(day), day, score=(1, 0) if day % 2 else None) for day in (9, 3, 7, 1)]

    first = assemble_matches(matches, season="2025-2026", source="ceskyhokej")
    second = assemble_matches(list(matches), season="2025-2026", source="ceskyhokej")

    assert [match.to_dict() for match in first] == [match.to_dict() for match in second]


def test_count_matches():
    canonical = assemble_matches(
        [make_match("a", 1, score=(1, 1)), make_match("b", 2), make_match("c", 3)],
        season="2025-2026",
        source="ceskyhokej",
    )

    assert count_matches(canonical) == (3, 1, 2)
    assert count_matches([]) == (0, 0, 0)
