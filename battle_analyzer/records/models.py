"""
Data models for deck battle analysis.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Deck:
    """Represents a registered deck."""
    id: str
    name: str
    colors: list[str] = field(default_factory=list)
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    project_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "colors": list(self.colors),
        }


@dataclass
class Battle:
    """
    One recorded game between two decks.

    Win and going-first counts are None when the stored record did not
    carry a usable number; date is None when it could not be parsed.
    """
    id: str
    deck1_id: str
    deck2_id: str
    deck1_wins: Optional[int] = None
    deck2_wins: Optional[int] = None
    deck1_going_first: Optional[int] = None
    deck2_going_first: Optional[int] = None
    date: Optional[datetime] = None
    memo: str = ""
    project_id: Optional[str] = None

    @property
    def has_result(self) -> bool:
        return self.deck1_wins is not None and self.deck2_wins is not None

    def involves(self, deck_id: str) -> bool:
        return deck_id in (self.deck1_id, self.deck2_id)

    def opponent_of(self, deck_id: str) -> str:
        return self.deck2_id if self.deck1_id == deck_id else self.deck1_id

    def wins_for(self, deck_id: str) -> int:
        if self.deck1_id == deck_id:
            return self.deck1_wins or 0
        return self.deck2_wins or 0

    def losses_for(self, deck_id: str) -> int:
        if self.deck1_id == deck_id:
            return self.deck2_wins or 0
        return self.deck1_wins or 0


@dataclass
class CompatibilityCell:
    """Aggregated results of one deck against one opponent."""
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    total_games: int = 0

    def to_dict(self) -> dict:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate,
            "total_games": self.total_games,
        }


@dataclass
class DeckRating:
    """Elo rating and raw record of a deck after replaying the log."""
    deck_id: str
    rating: float
    wins: int = 0
    losses: int = 0


@dataclass
class Triangle:
    """Three decks that beat each other in a fixed rotation."""
    deck1: Deck
    deck2: Deck
    deck3: Deck
    deck1_vs_deck2: float
    deck2_vs_deck3: float
    deck3_vs_deck1: float

    @property
    def decks(self) -> tuple[Deck, Deck, Deck]:
        return (self.deck1, self.deck2, self.deck3)

    @property
    def avg_win_rate(self) -> float:
        return (self.deck1_vs_deck2 + self.deck2_vs_deck3 + self.deck3_vs_deck1) / 3

    def to_dict(self) -> dict:
        return {
            "decks": [d.to_dict() for d in self.decks],
            "relationships": {
                "deck1_vs_deck2": self.deck1_vs_deck2,
                "deck2_vs_deck3": self.deck2_vs_deck3,
                "deck3_vs_deck1": self.deck3_vs_deck1,
            },
            "avg_win_rate": round(self.avg_win_rate, 1),
        }


@dataclass
class Cycle:
    """A dominance loop of any length; each deck beats the next one."""
    decks: tuple[Deck, ...]
    win_rates: tuple[float, ...]

    @property
    def avg_win_rate(self) -> float:
        return sum(self.win_rates) / len(self.win_rates)

    def to_dict(self) -> dict:
        return {
            "decks": [d.to_dict() for d in self.decks],
            "win_rates": list(self.win_rates),
            "avg_win_rate": round(self.avg_win_rate, 1),
        }


@dataclass
class Suggestion:
    """A recommended pairing to play next."""
    deck1: Deck
    deck2: Deck
    reason: str
    priority: float
    win_rate: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "deck1": self.deck1.to_dict(),
            "deck2": self.deck2.to_dict(),
            "reason": self.reason,
            "priority": self.priority,
            "win_rate": self.win_rate,
        }


@dataclass
class RankedDeck:
    """Aggregate standing of a deck across every opponent."""
    deck: Deck
    wins: int = 0
    losses: int = 0
    total_games: int = 0
    win_rate: float = 0.0
    normalized_win_rate: float = 0.0
    opponent_count: int = 0
    battles: int = 0

    def to_dict(self) -> dict:
        return {
            "deck": self.deck.to_dict(),
            "wins": self.wins,
            "losses": self.losses,
            "total_games": self.total_games,
            "win_rate": round(self.win_rate, 1),
            "normalized_win_rate": round(self.normalized_win_rate, 1),
            "opponent_count": self.opponent_count,
            "battles": self.battles,
        }


@dataclass
class Rivalry:
    """An evenly matched pair of decks."""
    deck1: Deck
    deck2: Deck
    deck1_win_rate: float
    deck2_win_rate: float
    total_games: int
    balance: float

    def to_dict(self) -> dict:
        return {
            "deck1": self.deck1.to_dict(),
            "deck2": self.deck2.to_dict(),
            "deck1_win_rate": round(self.deck1_win_rate, 1),
            "deck2_win_rate": round(self.deck2_win_rate, 1),
            "total_games": self.total_games,
            "balance": round(self.balance, 1),
        }


@dataclass
class OpponentRecord:
    """Results of one deck against a single opponent."""
    opponent_id: str
    opponent_name: str
    wins: int = 0
    losses: int = 0
    battles: int = 0

    @property
    def win_rate(self) -> float:
        total = self.wins + self.losses
        if total == 0:
            return 0.0
        return self.wins / total * 100


@dataclass
class DeckProfile:
    """Detailed statistics for a single deck."""
    deck: Deck
    wins: int = 0
    losses: int = 0
    total_games: int = 0
    battles: int = 0
    win_rate: float = 0.0
    normalized_win_rate: float = 0.0
    going_first_rate: float = 0.0
    going_first_win_rate: float = 0.0
    going_second_win_rate: float = 0.0
    opponents: list[OpponentRecord] = field(default_factory=list)
    recent_form: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "deck": self.deck.to_dict(),
            "wins": self.wins,
            "losses": self.losses,
            "total_games": self.total_games,
            "battles": self.battles,
            "win_rate": round(self.win_rate, 1),
            "normalized_win_rate": round(self.normalized_win_rate, 1),
            "going_first_rate": round(self.going_first_rate, 1),
            "going_first_win_rate": round(self.going_first_win_rate, 1),
            "going_second_win_rate": round(self.going_second_win_rate, 1),
            "opponents": [
                {
                    "opponent_id": o.opponent_id,
                    "opponent_name": o.opponent_name,
                    "wins": o.wins,
                    "losses": o.losses,
                    "battles": o.battles,
                    "win_rate": round(o.win_rate, 1),
                }
                for o in self.opponents
            ],
            "recent_form": list(self.recent_form),
        }
