"""
Recommend which pairings to play next.

Pairs fall into three tiers. Unplayed pairs always come first, then pairs
with only a handful of games, then well-sampled pairs ordered by how far
their result is from an even split.
"""
from ..config import (
    FEW_GAMES_BASE_PRIORITY,
    FEW_GAMES_STEP,
    FEW_GAMES_THRESHOLD,
    SUGGESTION_LIMIT,
    UNBALANCED_WEIGHT,
    UNPLAYED_PRIORITY,
)
from ..records.models import Deck, Suggestion
from .matchups import Matrix, get_cell

REASON_UNPLAYED = "unplayed"
REASON_FEW_GAMES = "few_games"
REASON_UNBALANCED = "unbalanced_winrate"


def suggest_matchups(
    decks: list[Deck],
    matrix: Matrix,
    *,
    limit: int = SUGGESTION_LIMIT,
    few_games_threshold: int = FEW_GAMES_THRESHOLD,
) -> list[Suggestion]:
    """
    Score every unordered deck pair and return the top ``limit``.

    Scoring uses the cell of the first deck (in list order) against the
    second. Equal priorities keep enumeration order.
    """
    suggestions = []
    for i, deck1 in enumerate(decks):
        for deck2 in decks[i + 1:]:
            cell = get_cell(matrix, deck1.id, deck2.id)

            if cell.total_games == 0:
                suggestions.append(Suggestion(
                    deck1=deck1,
                    deck2=deck2,
                    reason=REASON_UNPLAYED,
                    priority=UNPLAYED_PRIORITY,
                ))
            elif cell.total_games < few_games_threshold:
                suggestions.append(Suggestion(
                    deck1=deck1,
                    deck2=deck2,
                    reason=REASON_FEW_GAMES,
                    priority=FEW_GAMES_BASE_PRIORITY
                    + (few_games_threshold - cell.total_games) * FEW_GAMES_STEP,
                    win_rate=cell.win_rate,
                ))
            else:
                if cell.wins + cell.losses == 0:
                    continue
                suggestions.append(Suggestion(
                    deck1=deck1,
                    deck2=deck2,
                    reason=REASON_UNBALANCED,
                    priority=abs(cell.win_rate - 50) * UNBALANCED_WEIGHT,
                    win_rate=cell.win_rate,
                ))

    suggestions.sort(key=lambda s: s.priority, reverse=True)
    return suggestions[:limit]
