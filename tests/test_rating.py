from datetime import datetime, timezone

import pytest

from battle_analyzer.analyzer.rating import (
    RatingAnalyzer,
    compute_ratings,
    expected_score,
    rateable_battles,
)
from battle_analyzer.records.models import Battle
from factories import make_battle, make_decks


def test_single_win_moves_ratings_by_half_k():
    decks = make_decks("A", "B")
    battles = [make_battle("A", "B", winner="A", deck1_going_first=1, deck2_going_first=0)]

    ratings = compute_ratings(decks, battles)

    assert ratings["A"].rating == 1516
    assert ratings["B"].rating == 1484
    assert (ratings["A"].wins, ratings["A"].losses) == (1, 0)
    assert (ratings["B"].wins, ratings["B"].losses) == (0, 1)


def test_deck_without_battles_keeps_initial_rating():
    decks = make_decks("A", "B", "C")
    battles = [make_battle("A", "B", winner="B")]

    ratings = compute_ratings(decks, battles)

    assert ratings["C"].rating == 1500.0
    assert ratings["C"].wins == 0
    assert ratings["C"].losses == 0


def test_empty_log():
    ratings = compute_ratings(make_decks("A"), [])
    assert ratings["A"].rating == 1500.0


def test_expected_score_is_symmetric():
    assert expected_score(1500, 1500) == pytest.approx(0.5)
    assert expected_score(1600, 1400) + expected_score(1400, 1600) == pytest.approx(1.0)


def test_battles_replayed_in_date_order():
    decks = make_decks("A", "B")
    battles = [
        make_battle("A", "B", winner="A", day=2),
        make_battle("A", "B", winner="B", day=1),
    ]

    ratings = compute_ratings(decks, battles)

    # B's win on day 1 is applied first, then A's win on day 2.
    assert ratings["A"].rating == 1501
    assert ratings["B"].rating == 1499


def test_naive_and_aware_dates_are_ordered_together():
    decks = make_decks("A", "B")
    battles = [
        Battle(id="late", deck1_id="A", deck2_id="B", deck1_wins=1, deck2_wins=0,
               date=datetime(2024, 1, 2, tzinfo=timezone.utc)),
        Battle(id="early", deck1_id="A", deck2_id="B", deck1_wins=0, deck2_wins=1,
               date=datetime(2024, 1, 1)),
    ]

    ratings = compute_ratings(decks, battles)

    # The naive date reads as UTC, so B's win is replayed first.
    assert [b.id for b in rateable_battles(decks, battles)] == ["early", "late"]
    assert (ratings["A"].rating, ratings["B"].rating) == (1501, 1499)


def test_same_date_keeps_log_order():
    decks = make_decks("A", "B")
    first = make_battle("A", "B", winner="A", day=0)
    second = make_battle("A", "B", winner="B", day=0)

    forward = compute_ratings(decks, [first, second])
    backward = compute_ratings(decks, [second, first])

    assert (forward["A"].rating, forward["B"].rating) == (1499, 1501)
    assert (backward["A"].rating, backward["B"].rating) == (1501, 1499)


def test_rounding_is_half_up_after_each_game():
    decks = make_decks("A", "B")
    battles = [make_battle("A", "B", winner="A")]

    ratings = compute_ratings(decks, battles, k_factor=33)

    # 1500 + 16.5 and 1500 - 16.5
    assert ratings["A"].rating == 1517
    assert ratings["B"].rating == 1484


def test_malformed_battles_are_skipped():
    decks = make_decks("A", "B")
    battles = [
        make_battle("A", "ghost", winner="A"),
        make_battle("A", "B", winner="A", day=None),
        make_battle("A", "A", winner="A"),
        Battle(id="missing", deck1_id="A", deck2_id="B", deck1_wins=None, deck2_wins=1,
               date=make_battle("A", "B").date),
    ]

    ratings = compute_ratings(decks, battles)

    assert rateable_battles(decks, battles) == []
    assert ratings["A"].rating == 1500.0
    assert ratings["B"].rating == 1500.0
    assert ratings["A"].wins == 0
    assert ratings["B"].wins == 0


def test_unresolved_record_counts_as_deck1_not_winning():
    decks = make_decks("A", "B")
    battles = [make_battle("A", "B", winner=None)]

    ratings = compute_ratings(decks, battles)

    assert ratings["A"].rating == 1484
    assert ratings["B"].rating == 1516
    assert ratings["A"].wins == ratings["A"].losses == 0


def test_repeated_calls_are_identical():
    decks = make_decks("A", "B", "C")
    battles = [
        make_battle("A", "B", winner="A", day=1),
        make_battle("B", "C", winner="C", day=2),
        make_battle("C", "A", winner="C", day=3),
    ]

    assert compute_ratings(decks, battles) == compute_ratings(decks, battles)


def test_leaderboard_and_history():
    decks = make_decks("A", "B", "C")
    battles = [
        make_battle("A", "B", winner="A", day=1, battle_id="g1"),
        make_battle("C", "A", winner="A", day=2, battle_id="g2"),
    ]
    analyzer = RatingAnalyzer(decks, battles)

    board = analyzer.get_leaderboard()
    # C lost to a stronger deck, so it drops less than B did.
    assert [row["deck"]["id"] for row in board] == ["A", "C", "B"]
    assert board[0]["wins"] == 2

    history = analyzer.get_history("A")
    assert [h["battle_id"] for h in history] == ["g1", "g2"]
    assert history[0]["rating"] == 1516
    assert history[1]["opponent_id"] == "C"
    assert history[1]["rating"] > history[0]["rating"]
