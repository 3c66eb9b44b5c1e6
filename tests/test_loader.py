import json
from datetime import datetime, timezone

import pytest

from battle_analyzer.records.loader import (
    SnapshotError,
    battle_from_dict,
    deck_from_dict,
    load_snapshot,
    parse_snapshot,
)
from battle_analyzer.utils.date_utils import get_week_key, parse_battle_date


def test_battle_from_camel_case_record():
    battle = battle_from_dict({
        "id": "b1",
        "deck1Id": "A",
        "deck2Id": "B",
        "deck1Wins": 1,
        "deck2Wins": 0,
        "deck1GoingFirst": 1,
        "deck2GoingFirst": 0,
        "date": "2024-03-01T12:00:00Z",
        "memo": "close game",
        "projectId": "p1",
    })

    assert (battle.deck1_id, battle.deck2_id) == ("A", "B")
    assert (battle.deck1_wins, battle.deck2_wins) == (1, 0)
    assert battle.deck1_going_first == 1
    assert battle.date == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
    assert battle.memo == "close game"


def test_battle_from_incomplete_record():
    battle = battle_from_dict({
        "deck1_id": "A",
        "deck2_id": "B",
        "deck1_wins": float("nan"),
        "deck2_wins": "1",
        "date": "yesterday",
    })

    assert battle.id == ""
    assert battle.deck1_wins is None
    assert battle.deck2_wins is None
    assert battle.deck1_going_first is None
    assert battle.date is None
    assert not battle.has_result


def test_deck_from_record():
    deck = deck_from_dict({"id": "d1", "name": "Mono Red", "colors": ["R"], "createdAt": "2024-01-01"})

    assert deck.name == "Mono Red"
    assert deck.colors == ["R"]
    assert deck.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("value, expected", [
    (datetime(2024, 5, 1, 9), datetime(2024, 5, 1, 9, tzinfo=timezone.utc)),
    ("2024-05-01", datetime(2024, 5, 1, tzinfo=timezone.utc)),
    (0, datetime(1970, 1, 1, tzinfo=timezone.utc)),
    (1_704_067_200, datetime(2024, 1, 1, tzinfo=timezone.utc)),
    (1_704_067_200_000, datetime(2024, 1, 1, tzinfo=timezone.utc)),
    ({"seconds": 86400, "nanoseconds": 0}, datetime(1970, 1, 2, tzinfo=timezone.utc)),
    (float("nan"), None),
    ("not a date", None),
    (None, None),
    (True, None),
])
def test_parse_battle_date(value, expected):
    assert parse_battle_date(value) == expected


def test_week_key():
    assert get_week_key(datetime(2024, 1, 3, tzinfo=timezone.utc)) == "2024-W01"
    assert get_week_key(None) == "Unknown"


def test_parse_snapshot_skips_non_objects():
    decks, battles = parse_snapshot({
        "decks": [{"id": "A", "name": "A"}, "junk"],
        "battles": [None, {"deck1Id": "A", "deck2Id": "B"}],
    })

    assert [d.id for d in decks] == ["A"]
    assert len(battles) == 1


def test_parse_snapshot_rejects_bad_shape():
    with pytest.raises(SnapshotError):
        parse_snapshot({"decks": {}, "battles": []})
    with pytest.raises(SnapshotError):
        parse_snapshot([])


def test_load_snapshot(tmp_path):
    assert load_snapshot(tmp_path / "missing.json") is None

    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({"decks": [], "battles": []}), encoding="utf-8")
    assert load_snapshot(path) == {"decks": [], "battles": []}

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError):
        load_snapshot(path)

    path.write_text("[]", encoding="utf-8")
    with pytest.raises(SnapshotError):
        load_snapshot(path)
