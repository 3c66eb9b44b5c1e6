"""
Cyclic dominance ("rock-paper-scissors") detection.

Each candidate group is checked in one orientation only: the order the decks
appear in the deck list, wrapping back to the first deck. A loop that runs
the other way round for the same decks is not reported.
"""
from itertools import combinations
from typing import Optional

from ..config import MAX_CYCLE_SIZE, TRIANGLE_MIN_GAMES, TRIANGLE_MIN_WIN_RATE
from ..records.models import Cycle, Deck, Triangle
from .matchups import Matrix, get_cell


def _cycle_win_rates(
    group: tuple[Deck, ...],
    matrix: Matrix,
    min_games: int,
    min_win_rate: float,
) -> Optional[list[float]]:
    """Win rates of each leg ``group[i] -> group[i+1]``, or None if a leg fails."""
    win_rates = []
    for i, deck in enumerate(group):
        target = group[(i + 1) % len(group)]
        cell = get_cell(matrix, deck.id, target.id)
        if cell.total_games < min_games or cell.win_rate < min_win_rate:
            return None
        win_rates.append(cell.win_rate)
    return win_rates


def find_triangles(
    decks: list[Deck],
    matrix: Matrix,
    *,
    min_games: int = TRIANGLE_MIN_GAMES,
    min_win_rate: float = TRIANGLE_MIN_WIN_RATE,
) -> list[Triangle]:
    """
    Find three-deck dominance loops.

    Args:
        decks: Deck collection; its order fixes the orientation tested
        matrix: Compatibility matrix from ``build_matrix``
        min_games: Games required on every leg
        min_win_rate: Win rate (percent) required on every leg

    Returns:
        Triangles sorted by mean leg win rate, highest first
    """
    triangles = []
    for group in combinations(decks, 3):
        win_rates = _cycle_win_rates(group, matrix, min_games, min_win_rate)
        if win_rates is None:
            continue
        triangles.append(Triangle(
            deck1=group[0],
            deck2=group[1],
            deck3=group[2],
            deck1_vs_deck2=win_rates[0],
            deck2_vs_deck3=win_rates[1],
            deck3_vs_deck1=win_rates[2],
        ))

    triangles.sort(key=lambda t: t.avg_win_rate, reverse=True)
    return triangles


def find_cycles(
    decks: list[Deck],
    matrix: Matrix,
    *,
    max_size: int = MAX_CYCLE_SIZE,
    min_games: int = TRIANGLE_MIN_GAMES,
    min_win_rate: float = TRIANGLE_MIN_WIN_RATE,
) -> list[Cycle]:
    """
    Find dominance loops of three up to ``max_size`` decks.

    Uses the same per-leg thresholds and orientation rule as
    ``find_triangles``; results of every size are merged and sorted by mean
    leg win rate, highest first.
    """
    cycles = []
    for size in range(3, min(max_size, len(decks)) + 1):
        for group in combinations(decks, size):
            win_rates = _cycle_win_rates(group, matrix, min_games, min_win_rate)
            if win_rates is not None:
                cycles.append(Cycle(decks=group, win_rates=tuple(win_rates)))

    cycles.sort(key=lambda c: c.avg_win_rate, reverse=True)
    return cycles
