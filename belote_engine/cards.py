# belote_engine/cards.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional
import enum
import random


class Suit(enum.Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(enum.Enum):
    SEVEN = "seven"
    EIGHT = "eight"
    NINE = "nine"
    TEN = "ten"
    JACK = "jack"
    QUEEN = "queen"
    KING = "king"
    ACE = "ace"


# Natural order of ranks inside a suit; sequences are contiguous runs of it.
RANK_ORDER: List[Rank] = [
    Rank.SEVEN,
    Rank.EIGHT,
    Rank.NINE,
    Rank.TEN,
    Rank.JACK,
    Rank.QUEEN,
    Rank.KING,
    Rank.ACE,
]

PLAIN_POINTS: Dict[Rank, int] = {
    Rank.ACE: 11,
    Rank.KING: 4,
    Rank.QUEEN: 3,
    Rank.JACK: 2,
    Rank.TEN: 10,
    Rank.NINE: 0,
    Rank.EIGHT: 0,
    Rank.SEVEN: 0,
}

TRUMP_POINTS: Dict[Rank, int] = {
    Rank.ACE: 11,
    Rank.KING: 4,
    Rank.QUEEN: 3,
    Rank.JACK: 20,
    Rank.TEN: 10,
    Rank.NINE: 14,
    Rank.EIGHT: 0,
    Rank.SEVEN: 0,
}

DECK_SIZE = 32


@dataclass(frozen=True)
class Card:
    """A Belote card: one of 4 suits × 8 ranks. Equal by (suit, rank)."""

    suit: Suit
    rank: Rank

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid suit: {self.suit!r}")
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Invalid rank: {self.rank!r}")

    def __str__(self) -> str:
        return f"{self.rank.name.title()} of {self.suit.name.title()}"


def card_value(card: Card, trump: Optional[Suit]) -> int:
    """Point value of `card`, using the trump table when its suit is trump."""
    if trump is not None and card.suit == trump:
        return TRUMP_POINTS[card.rank]
    return PLAIN_POINTS[card.rank]


def plain_strength(card: Card) -> tuple[int, int]:
    """Trump-agnostic ordering key: plain points, then natural rank order."""
    return PLAIN_POINTS[card.rank], RANK_ORDER.index(card.rank)


def card_strength(card: Card, trump: Optional[Suit]) -> tuple[int, int]:
    """Ordering key within one suit, trump-aware.

    Points decide first; cards worth the same (seven / eight, and the plain
    nine) fall back to their natural rank order.
    """
    return card_value(card, trump), RANK_ORDER.index(card.rank)


def cards_points(cards: List[Card], trump: Optional[Suit]) -> int:
    return sum(card_value(c, trump) for c in cards)


def full_deck() -> List[Card]:
    """The 32 distinct cards in suit-major, rank-ascending order."""
    return [Card(suit, rank) for suit in Suit for rank in RANK_ORDER]


class Deck:
    """
    A Belote deck of 32 cards, consumed from the top by dealing.

    A fresh deck is built and shuffled once per round; it is never refilled.
    """

    def __init__(self, cards: Optional[List[Card]] = None) -> None:
        self.cards: List[Card] = list(cards) if cards is not None else full_deck()

        if len(self.cards) != DECK_SIZE or len(set(self.cards)) != DECK_SIZE:
            raise ValueError("Deck must contain exactly 32 distinct cards")

    def __len__(self) -> int:
        return len(self.cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """Shuffle the deck in place. Uses provided RNG if given."""
        if rng is None:
            random.shuffle(self.cards)
        else:
            rng.shuffle(self.cards)

    def draw(self, count: int) -> List[Card]:
        """Remove and return the top `count` cards."""
        if count > len(self.cards):
            raise ValueError("Not enough cards in deck to deal")
        drawn = self.cards[:count]
        del self.cards[:count]
        return drawn
