import asyncio
from datetime import datetime

import httpx

from hokej.scraper import build_client
from hokej.service import handle_import, handle_import_query, handle_standings, run_import
from hokej.sources import ZAPASY_PROFILE

MATCH_PAGE = """
<table><tbody>
  <tr><td></td><td></td><td>17.01.2026 - 18.01.2026</td><td>10:00</td><td>Arena X</td>
      <td>Liga starších žáků "A" sk. 2</td><td>5</td><td>12</td>
      <td>Slovan Ústí</td><td>HC Jiný</td><td>[3:2]</td></tr>
  <tr><td></td><td></td><td>24.01.2026</td><td>9:00</td><td>ZS Most</td>
      <td>Liga mladších žáků "B" sk. 14</td><td>6</td><td>40</td>
      <td>HC Most</td><td>HC Slovan Ústí n.L.</td><td></td></tr>
  <tr><td></td><td></td><td>10.01.2026</td><td>12:00</td><td>ZS Ústí</td>
      <td>Liga starších žáků "A" sk. 2</td><td>4</td><td>9</td>
      <td>HC Slovan Ústí</td><td>HC Most</td><td></td></tr>
</tbody></table>
"""

STANDINGS_PAGE = """
<table>
  <thead><tr><th>Poř.</th><th>Tým</th><th>Z</th><th>V</th><th>VP</th><th>PP</th><th>P</th><th>Skóre</th><th>B</th></tr></thead>
  <tbody>
    <tr><td>2.</td><td>HC Most</td><td>10</td><td>6</td><td>0</td><td>1</td><td>3</td><td>40:31</td><td>19</td></tr>
    <tr><td>1.</td><td>HC Slovan Ústí n.L.</td><td>10</td><td>7</td><td>2</td><td>0</td><td>1</td><td>61:20</td><td>25</td></tr>
  </tbody>
</table>
"""


def zapasy_handler(request):
    if request.url.host == "slovanusti.cz":
        if request.url.params["category"] == "Z8":
            return httpx.Response(200, text=STANDINGS_PAGE)
        return httpx.Response(200, text="<p>Tabulka není k dispozici</p>")
    return httpx.Response(200, text=MATCH_PAGE)


def call(handler, func, *args, **kwargs):
    async def go():
        async with build_client(5, transport=httpx.MockTransport(handler)) as client:
            return await func(*args, client=client, debug_dir=None, **kwargs)

    return asyncio.run(go())


def test_import_end_to_end_with_category_filter():
    status, payload = call(
        zapasy_handler,
        handle_import,
        {"season": "2025-2026", "category": "starsi-zaci-a", "source": "zapasy"},
    )

    assert status == 200
    assert payload["success"] is True
    assert [match["externalId"] for match in payload["matches"]] == [
        "starsi-zaci-a-9",
        "starsi-zaci-a-12-1",
        "starsi-zaci-a-12-2",
    ]
    first_range, second_range = payload["matches"][1:]
    assert first_range["datetime"] == "2026-01-17T10:00:00"
    assert second_range["datetime"] == "2026-01-18T10:00:00"
    for match in (first_range, second_range):
        assert match["completed"] is True
        assert match["status"] == "completed"
        assert (match["homeScore"], match["awayScore"]) == (3, 2)
        assert match["id"] == f"imported-{match['externalId']}"
        assert match["seasonId"] == "2025-2026"
        assert match["source"] == "ceskyhokej"
    assert (payload["totalCount"], payload["completedCount"], payload["upcomingCount"]) == (3, 2, 1)
    assert isinstance(payload["elapsed"], int)

    [standings] = payload["standings"]
    assert standings["id"] == "standings-Z8-2025-2026"
    assert standings["competitionId"] == "Z8"
    assert [row["teamName"] for row in standings["rows"]] == ["HC Slovan Ústí n.L.", "HC Most"]
    assert standings["rows"][0]["isOurTeam"] is True
    assert standings["rows"][0]["winsOT"] == 2
    assert "draws" not in standings["rows"][0]


def test_run_import_without_filter_and_standings():
    result = call(
        zapasy_handler,
        run_import,
        "2025-2026",
        profile=ZAPASY_PROFILE,
        with_standings=False,
        now=datetime(2026, 1, 20),
    )

    assert result.standings == ()
    assert result.total_count == 4
    assert [match.category for match in result.matches] == [
        "Starší žáci A",
        "Starší žáci A",
        "Starší žáci A",
        "Mladší žáci B",
    ]


def test_found_nothing_is_a_successful_empty_result():
    status, payload = call(
        lambda request: httpx.Response(200, text="<html></html>"),
        handle_import,
        {"season": "2025-2026", "source": "zapasy"},
    )

    assert status == 200
    assert payload["matches"] == []
    assert payload["standings"] == []
    assert payload["totalCount"] == 0


def test_failing_sources_still_succeed():
    status, payload = call(
        lambda request: httpx.Response(502),
        handle_import,
        {"season": "2025-2026", "category": "mladsi-zaci-a"},
    )

    assert status == 200
    assert payload["totalCount"] == 0


def test_invalid_requests_are_rejected():
    for body in (
        {"season": "2025/26"},
        {"season": "2025-2027"},
        {"category": "junioři"},
        {"source": "nowhere"},
        ["not", "an", "object"],
    ):
        status, payload = call(zapasy_handler, handle_import, body)
        assert status == 400
        assert payload["error"] == "Invalid import request"
        assert payload["details"]


def test_unexpected_failure_becomes_error_envelope():
    def handler(request):
        raise RuntimeError("parser exploded")

    status, payload = call(handler, handle_import, {"season": "2025-2026", "source": "zapasy"})

    assert status == 500
    assert payload == {"error": "Import failed", "details": "parser exploded"}


def test_query_variant_uses_same_semantics():
    status, payload = call(
        zapasy_handler,
        handle_import_query,
        {"season": "2025-2026", "category": "mladsi-zaci-b", "source": "zapasy", "ignored": "x"},
        with_standings=False,
    )

    assert status == 200
    assert [match["externalId"] for match in payload["matches"]] == ["mladsi-zaci-b-40"]
    assert payload["matches"][0]["completed"] is False


def test_standings_for_one_category():
    status, payload = call(
        zapasy_handler,
        handle_standings,
        {"season": "2025-2026", "category": "starsi-zaci-a", "source": "zapasy"},
    )

    assert status == 200
    assert payload["standings"]["competitionName"] == 'Liga starších žáků "A" sk. 2'
    assert [row["position"] for row in payload["standings"]["rows"]] == [1, 2]


def test_missing_standings_give_not_found():
    status, payload = call(
        zapasy_handler,
        handle_standings,
        {"season": "2025-2026", "competitionId": "mladsi-zaci-a", "source": "zapasy"},
    )

    assert status == 404
    assert payload == {
        "error": "Standings not found",
        "competitionId": "mladsi-zaci-a",
        "season": "2025-2026",
    }


def test_all_standings_lists_competitions():
    status, payload = call(zapasy_handler, handle_standings, {"season": "2025-2026", "source": "zapasy"})

    assert status == 200
    assert len(payload["standings"]) == 1
    assert [item["code"] for item in payload["competitions"]] == [
        "starsi-zaci-b",
        "starsi-zaci-a",
        "mladsi-zaci-b",
        "mladsi-zaci-a",
    ]
