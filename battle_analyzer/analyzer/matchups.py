"""
Matchup analysis between decks.
"""
from ..config import (
    FAVORABLE_WIN_RATE,
    MATCHUP_MIN_GAMES,
    RIVALRY_MAX_BALANCE,
    RIVALRY_MIN_GAMES,
    UNFAVORABLE_WIN_RATE,
)
from ..records.models import Battle, CompatibilityCell, Deck, Rivalry

Matrix = dict[str, dict[str, CompatibilityCell]]


def build_matrix(decks: list[Deck], battles: list[Battle]) -> Matrix:
    """
    Aggregate win/loss counts for every ordered pair of distinct decks.

    ``matrix[a][b]`` holds a's results against b. Battles naming a deck
    outside ``decks`` contribute nothing.
    """
    matrix: Matrix = {}
    for deck in decks:
        matrix[deck.id] = {
            opponent.id: CompatibilityCell()
            for opponent in decks
            if opponent.id != deck.id
        }

    for battle in battles:
        deck1_wins = battle.deck1_wins or 0
        deck2_wins = battle.deck2_wins or 0

        cell = matrix.get(battle.deck1_id, {}).get(battle.deck2_id)
        if cell is not None:
            cell.wins += deck1_wins
            cell.losses += deck2_wins

        cell = matrix.get(battle.deck2_id, {}).get(battle.deck1_id)
        if cell is not None:
            cell.wins += deck2_wins
            cell.losses += deck1_wins

    for row in matrix.values():
        for cell in row.values():
            cell.total_games = cell.wins + cell.losses
            cell.win_rate = cell.wins / cell.total_games * 100 if cell.total_games > 0 else 0.0

    return matrix


def get_cell(matrix: Matrix, deck_id: str, opponent_id: str) -> CompatibilityCell:
    """Look up a cell, falling back to an empty one."""
    cell = matrix.get(deck_id, {}).get(opponent_id)
    if cell is None:
        return CompatibilityCell()
    return cell


def find_rivalries(
    decks: list[Deck],
    matrix: Matrix,
    *,
    min_games: int = RIVALRY_MIN_GAMES,
    max_balance: float = RIVALRY_MAX_BALANCE,
) -> list[Rivalry]:
    """
    Find evenly matched pairs.

    A pair qualifies when it has at least ``min_games`` games and the first
    deck's win rate is within ``max_balance`` points of 50%. Closest
    matchups come first.
    """
    rivalries = []
    for i, deck1 in enumerate(decks):
        for deck2 in decks[i + 1:]:
            cell = get_cell(matrix, deck1.id, deck2.id)
            if cell.total_games < min_games:
                continue

            balance = abs(cell.win_rate - 50)
            if balance > max_balance:
                continue

            rivalries.append(Rivalry(
                deck1=deck1,
                deck2=deck2,
                deck1_win_rate=cell.win_rate,
                deck2_win_rate=get_cell(matrix, deck2.id, deck1.id).win_rate,
                total_games=cell.total_games,
                balance=balance,
            ))

    rivalries.sort(key=lambda r: r.balance)
    return rivalries


class MatchupAnalyzer:
    """Analyzes matchups between decks."""

    def __init__(self, decks: list[Deck], battles: list[Battle]):
        """
        Initialize with a snapshot of the log.

        Args:
            decks: Deck collection
            battles: Battle log
        """
        self.decks = decks
        self.battles = battles

    def get_matrix_data(self) -> dict:
        """Get the full matrix keyed by deck id, ready for JSON."""
        matrix = build_matrix(self.decks, self.battles)
        return {
            "decks": [d.to_dict() for d in self.decks],
            "matrix": {
                deck_id: {opp_id: cell.to_dict() for opp_id, cell in row.items()}
                for deck_id, row in matrix.items()
            },
        }

    def get_heatmap_data(self) -> dict:
        """Get data formatted for heatmap visualization."""
        matrix = build_matrix(self.decks, self.battles)

        values = []
        for deck in self.decks:
            row = []
            for opponent in self.decks:
                if opponent.id == deck.id:
                    row.append(None)
                else:
                    row.append(round(get_cell(matrix, deck.id, opponent.id).win_rate, 1))
            values.append(row)

        return {
            "labels": [d.name for d in self.decks],
            "values": values
        }

    def get_deck_matchups(
        self,
        deck_id: str,
        min_games: int = MATCHUP_MIN_GAMES,
        favorable_win_rate: float = FAVORABLE_WIN_RATE,
        unfavorable_win_rate: float = UNFAVORABLE_WIN_RATE,
    ) -> dict:
        """
        Get matchup data for a specific deck.

        Args:
            deck_id: Deck to analyze
            min_games: Games needed before a matchup counts as decided
            favorable_win_rate: Win rate a decided matchup must exceed to be favorable
            unfavorable_win_rate: Win rate a decided matchup must stay under to be unfavorable

        Returns:
            Dictionary with favorable, unfavorable, and even matchups
        """
        matrix = build_matrix(self.decks, self.battles)

        favorable = []
        unfavorable = []
        even = []

        for opponent in self.decks:
            if opponent.id == deck_id:
                continue

            cell = get_cell(matrix, deck_id, opponent.id)
            if cell.total_games == 0:
                continue

            matchup_info = {
                "opponent_id": opponent.id,
                "opponent": opponent.name,
                "winrate": round(cell.win_rate, 1),
                "matches": cell.total_games
            }

            if cell.total_games < min_games:
                even.append(matchup_info)
            elif cell.win_rate > favorable_win_rate:
                favorable.append(matchup_info)
            elif cell.win_rate < unfavorable_win_rate:
                unfavorable.append(matchup_info)
            else:
                even.append(matchup_info)

        # Sort by winrate
        favorable.sort(key=lambda x: x["winrate"], reverse=True)
        unfavorable.sort(key=lambda x: x["winrate"])

        return {
            "deck_id": deck_id,
            "favorable": favorable,
            "unfavorable": unfavorable,
            "even": even
        }

    def get_rivalries(self) -> list[dict]:
        """Get evenly matched pairs for display."""
        matrix = build_matrix(self.decks, self.battles)
        return [r.to_dict() for r in find_rivalries(self.decks, matrix)]
