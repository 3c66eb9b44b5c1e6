import json

import pytest

from battle_analyzer.web.data_manager import DataManager

SAMPLE_SNAPSHOT = {
    "project": {"id": "p1", "name": "Weekly League"},
    "exported_at": "2024-02-01T00:00:00Z",
    "decks": [
        {"id": "A", "name": "Aggro", "colors": ["R"]},
        {"id": "B", "name": "Burn", "colors": ["R", "B"]},
        {"id": "C", "name": "Control", "colors": ["U"]},
    ],
    "battles": [
        {"id": "1", "deck1Id": "A", "deck2Id": "B", "deck1Wins": 1, "deck2Wins": 0,
         "deck1GoingFirst": 1, "deck2GoingFirst": 0, "date": "2024-01-01T10:00:00Z"},
        {"id": "2", "deck1Id": "A", "deck2Id": "B", "deck1Wins": 1, "deck2Wins": 0,
         "deck1GoingFirst": 0, "deck2GoingFirst": 1, "date": "2024-01-02T10:00:00Z"},
        {"id": "3", "deck1Id": "B", "deck2Id": "C", "deck1Wins": 1, "deck2Wins": 0,
         "date": "2024-01-03T10:00:00Z"},
        {"id": "4", "deck1Id": "B", "deck2Id": "C", "deck1Wins": 1, "deck2Wins": 0,
         "date": "2024-01-08T10:00:00Z"},
        {"id": "5", "deck1Id": "C", "deck2Id": "A", "deck1Wins": 1, "deck2Wins": 0,
         "date": "2024-01-09T10:00:00Z"},
        {"id": "6", "deck1Id": "C", "deck2Id": "A", "deck1Wins": 1, "deck2Wins": 0,
         "date": "2024-01-10T10:00:00Z"},
        {"id": "7", "deck1Id": "A", "deck2Id": "ghost", "deck1Wins": 1, "deck2Wins": 0,
         "date": "2024-01-11T10:00:00Z"},
    ],
}


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(SAMPLE_SNAPSHOT), encoding="utf-8")
    return path


@pytest.fixture
def data_manager(monkeypatch, snapshot_file):
    """A fresh DataManager bound to the sample snapshot."""
    monkeypatch.setattr(DataManager, "_instance", None)
    return DataManager(snapshot_file, cache_ttl=300)


@pytest.fixture
def client(monkeypatch, data_manager):
    from battle_analyzer.web import app as web_app

    monkeypatch.setattr(web_app, "data_manager", data_manager)
    web_app.app.config.update(TESTING=True)
    return web_app.app.test_client()
