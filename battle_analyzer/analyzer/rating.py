"""
Elo rating replay over the battle log.
"""
import logging
import math
from typing import Iterator

from ..config import INITIAL_RATING, K_FACTOR
from ..records.models import Battle, Deck, DeckRating
from ..utils.date_utils import parse_battle_date

logger = logging.getLogger(__name__)


def expected_score(rating: float, opponent_rating: float) -> float:
    """Probability-like expected score of ``rating`` against ``opponent_rating``."""
    return 1 / (1 + 10 ** ((opponent_rating - rating) / 400))


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def rateable_battles(decks: list[Deck], battles: list[Battle]) -> list[Battle]:
    """
    Battles usable for rating, in chronological order.

    A battle is skipped when either deck is unknown, both sides are the same
    deck, the date could not be parsed, or a win count is missing. Battles
    sharing a date keep their log order.
    """
    known = {d.id for d in decks}
    valid = []
    for battle in battles:
        when = parse_battle_date(battle.date)
        if battle.deck1_id not in known or battle.deck2_id not in known:
            logger.debug("Skipping battle %s: unknown deck", battle.id)
        elif battle.deck1_id == battle.deck2_id:
            logger.debug("Skipping battle %s: deck plays itself", battle.id)
        elif when is None:
            logger.debug("Skipping battle %s: unparseable date", battle.id)
        elif not battle.has_result:
            logger.debug("Skipping battle %s: missing win counts", battle.id)
        else:
            valid.append((when, battle))

    valid.sort(key=lambda pair: pair[0])
    return [battle for _, battle in valid]


def replay_ratings(
    decks: list[Deck],
    battles: list[Battle],
    *,
    initial_rating: float = INITIAL_RATING,
    k_factor: float = K_FACTOR,
) -> Iterator[tuple[Battle, dict[str, float]]]:
    """
    Replay rateable battles one at a time.

    Yields each battle together with a copy of every deck's rating right
    after that battle was applied.
    """
    ratings = {d.id: float(initial_rating) for d in decks}

    for battle in rateable_battles(decks, battles):
        ra = ratings[battle.deck1_id]
        rb = ratings[battle.deck2_id]
        ea = expected_score(ra, rb)
        eb = 1 - ea

        score_a = 1.0 if battle.deck1_wins > battle.deck2_wins else 0.0
        score_b = 1.0 - score_a

        # Round after every game, not once at the end.
        ratings[battle.deck1_id] = _round_half_up(ra + k_factor * (score_a - ea))
        ratings[battle.deck2_id] = _round_half_up(rb + k_factor * (score_b - eb))

        yield battle, dict(ratings)


def compute_ratings(
    decks: list[Deck],
    battles: list[Battle],
    *,
    initial_rating: float = INITIAL_RATING,
    k_factor: float = K_FACTOR,
) -> dict[str, DeckRating]:
    """
    Compute the final rating and raw record of every deck.

    Args:
        decks: Deck collection; every deck appears in the result
        battles: Battle log in stored order
        initial_rating: Rating every deck starts from
        k_factor: Elo sensitivity

    Returns:
        Mapping of deck id to DeckRating
    """
    results = {
        d.id: DeckRating(deck_id=d.id, rating=float(initial_rating))
        for d in decks
    }

    for battle, ratings in replay_ratings(
        decks, battles, initial_rating=initial_rating, k_factor=k_factor
    ):
        results[battle.deck1_id].rating = ratings[battle.deck1_id]
        results[battle.deck2_id].rating = ratings[battle.deck2_id]

        results[battle.deck1_id].wins += battle.deck1_wins
        results[battle.deck1_id].losses += battle.deck2_wins
        results[battle.deck2_id].wins += battle.deck2_wins
        results[battle.deck2_id].losses += battle.deck1_wins

    return results


class RatingAnalyzer:
    """Rating views for display."""

    def __init__(self, decks: list[Deck], battles: list[Battle]):
        self.decks = decks
        self.battles = battles

    def get_leaderboard(self) -> list[dict]:
        """Decks ordered by rating, highest first; equal ratings by name."""
        ratings = compute_ratings(self.decks, self.battles)

        rows = [
            {
                "deck": deck.to_dict(),
                "rating": ratings[deck.id].rating,
                "wins": ratings[deck.id].wins,
                "losses": ratings[deck.id].losses,
            }
            for deck in self.decks
        ]
        rows.sort(key=lambda r: (-r["rating"], r["deck"]["name"]))
        return rows

    def get_history(self, deck_id: str) -> list[dict]:
        """Rating of one deck after each of its rated battles."""
        history = []
        for battle, ratings in replay_ratings(self.decks, self.battles):
            if not battle.involves(deck_id):
                continue
            history.append({
                "battle_id": battle.id,
                "date": parse_battle_date(battle.date).isoformat(),
                "opponent_id": battle.opponent_of(deck_id),
                "rating": ratings[deck_id],
            })
        return history
