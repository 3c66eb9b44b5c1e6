"""
Rating and win rate annotations for tournament entrants.
"""
from ..config import INITIAL_RATING
from ..records.models import Battle, Deck
from .rating import compute_ratings
from .winrate import rank_decks


def annotate_entrants(
    entrant_ids: list[str],
    decks: list[Deck],
    battles: list[Battle],
    *,
    initial_rating: float = INITIAL_RATING,
) -> list[dict]:
    """
    Annotate each entrant with its current rating and pooled win rate.

    Entrants keep the order given. An id that is not in ``decks`` gets the
    initial rating, an empty name and no games.
    """
    ratings = compute_ratings(decks, battles, initial_rating=initial_rating)
    standings = {r.deck.id: r for r in rank_decks(decks, battles)}
    names = {d.id: d.name for d in decks}

    annotations = []
    for deck_id in entrant_ids:
        rating = ratings.get(deck_id)
        standing = standings.get(deck_id)
        annotations.append({
            "deck_id": deck_id,
            "name": names.get(deck_id, ""),
            "rating": rating.rating if rating else float(initial_rating),
            "win_rate": round(standing.win_rate, 1) if standing else 0.0,
            "total_games": standing.total_games if standing else 0,
        })
    return annotations
