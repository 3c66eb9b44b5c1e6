"""
Win rate analysis module.
"""
import math
from typing import Optional

from ..config import RECENT_FORM_LENGTH
from ..records.models import Battle, Deck, DeckProfile, OpponentRecord, RankedDeck
from ..utils.date_utils import parse_battle_date
from .matchups import build_matrix

RANKING_MODES = ("plain", "normalized")


def _countable(battle: Battle, known: set[str]) -> bool:
    return (
        battle.deck1_id in known
        and battle.deck2_id in known
        and battle.deck1_id != battle.deck2_id
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def rank_decks(
    decks: list[Deck],
    battles: list[Battle],
    mode: str = "plain",
) -> list[RankedDeck]:
    """
    Rank every deck by win rate.

    Args:
        decks: Deck collection; decks without games are kept with 0%
        battles: Battle log
        mode: ``"plain"`` pools every game; ``"normalized"`` averages the
            win rate against each opponent faced, one vote per opponent

    Returns:
        Ranked decks, best first; equal rates fall back to name order
    """
    if mode not in RANKING_MODES:
        raise ValueError(f"Unknown ranking mode: {mode!r}")

    known = {d.id for d in decks}
    matrix = build_matrix(decks, battles)

    ranked = []
    for deck in decks:
        entry = RankedDeck(deck=deck)

        for battle in battles:
            if not battle.involves(deck.id) or not _countable(battle, known):
                continue
            entry.battles += 1
            entry.wins += battle.wins_for(deck.id)
            entry.losses += battle.losses_for(deck.id)

        entry.total_games = entry.wins + entry.losses
        if entry.total_games > 0:
            entry.win_rate = entry.wins / entry.total_games * 100

        opponent_rates = [
            cell.win_rate
            for cell in matrix.get(deck.id, {}).values()
            if cell.total_games > 0
        ]
        entry.opponent_count = len(opponent_rates)
        if opponent_rates:
            entry.normalized_win_rate = sum(opponent_rates) / len(opponent_rates)

        ranked.append(entry)

    if mode == "normalized":
        ranked.sort(key=lambda r: (-r.normalized_win_rate, r.deck.name))
    else:
        ranked.sort(key=lambda r: (-r.win_rate, r.deck.name))
    return ranked


def deck_profile(
    deck: Deck,
    decks: list[Deck],
    battles: list[Battle],
    recent_length: int = RECENT_FORM_LENGTH,
) -> DeckProfile:
    """
    Build the detailed statistics of one deck.

    Going-first figures only use records that carry both going-first
    counts. A record's wins are split between going first and going second
    in proportion to how often the deck went first in it.
    """
    known = {d.id for d in decks}
    names = {d.id: d.name for d in decks}
    profile = DeckProfile(deck=deck)

    opponents: dict[str, OpponentRecord] = {}
    going_first_games = going_second_games = 0
    going_first_wins = going_second_wins = 0
    dated: list[tuple] = []

    for battle in battles:
        if not battle.involves(deck.id) or not _countable(battle, known):
            continue

        is_deck1 = battle.deck1_id == deck.id
        my_wins = battle.wins_for(deck.id)
        my_losses = battle.losses_for(deck.id)
        profile.battles += 1
        profile.wins += my_wins
        profile.losses += my_losses

        if battle.deck1_going_first is not None and battle.deck2_going_first is not None:
            my_first = battle.deck1_going_first if is_deck1 else battle.deck2_going_first
            my_second = battle.deck2_going_first if is_deck1 else battle.deck1_going_first
            going_first_games += my_first
            going_second_games += my_second
            if my_first + my_second > 0:
                first_share_wins = _round_half_up(my_wins * my_first / (my_first + my_second))
                going_first_wins += first_share_wins
                going_second_wins += my_wins - first_share_wins

        opponent_id = battle.opponent_of(deck.id)
        record = opponents.get(opponent_id)
        if record is None:
            record = OpponentRecord(opponent_id=opponent_id, opponent_name=names[opponent_id])
            opponents[opponent_id] = record
        record.wins += my_wins
        record.losses += my_losses
        record.battles += 1

        when = parse_battle_date(battle.date)
        if when is not None:
            dated.append((when, battle))

    profile.total_games = profile.wins + profile.losses
    if profile.total_games > 0:
        profile.win_rate = profile.wins / profile.total_games * 100

    played = [o for o in opponents.values() if o.wins + o.losses > 0]
    if played:
        profile.normalized_win_rate = sum(o.win_rate for o in played) / len(played)

    total_turn_games = going_first_games + going_second_games
    if total_turn_games > 0:
        profile.going_first_rate = going_first_games / total_turn_games * 100
    if going_first_games > 0:
        profile.going_first_win_rate = going_first_wins / going_first_games * 100
    if going_second_games > 0:
        profile.going_second_win_rate = going_second_wins / going_second_games * 100

    profile.opponents = sorted(opponents.values(), key=lambda o: o.battles, reverse=True)

    recent = sorted(dated, key=lambda pair: pair[0], reverse=True)[:recent_length]
    for _, battle in recent:
        wins = battle.wins_for(deck.id)
        losses = battle.losses_for(deck.id)
        profile.recent_form.append("W" if wins > losses else "L" if losses > wins else "D")

    return profile


class WinRateAnalyzer:
    """Analyzes deck win rates."""

    def __init__(self, decks: list[Deck], battles: list[Battle]):
        self.decks = decks
        self.battles = battles

    def get_rankings(self, mode: str = "plain") -> list[dict]:
        return [r.to_dict() for r in rank_decks(self.decks, self.battles, mode)]

    def get_deck_detail(self, deck_id: str) -> Optional[dict]:
        """Get detailed statistics for one deck, or None if it is unknown."""
        for deck in self.decks:
            if deck.id == deck_id:
                return deck_profile(deck, self.decks, self.battles).to_dict()
        return None

    def get_chart_data(self, mode: str = "plain") -> dict:
        """Get data formatted for win rate chart display."""
        rankings = rank_decks(self.decks, self.battles, mode)

        return {
            "labels": [r.deck.name for r in rankings],
            "win_rates": [round(r.win_rate, 1) for r in rankings],
            "normalized_win_rates": [round(r.normalized_win_rate, 1) for r in rankings],
            "games": [r.total_games for r in rankings]
        }
