# belote_engine/agents/policy.py
"""
Pure decision functions for automated seats.

Each function sees only the deciding seat's own cards, the trick on the
table and the trump suit.
"""
from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from ..cards import Card, Suit, card_value
from ..combinations import best_combination
from ..errors import NoLegalCardError
from ..rules import can_beat, legal_cards
from ..state import PlayedCard

MIN_CARDS_FOR_BID = 3
MIN_SCORE_FOR_BID = 6.0


def suit_bid_scores(hand: Sequence[Card]) -> Dict[Suit, float]:
    """Score each suit as count * 2 + (points as if trump) * 0.1."""
    counts = {suit: 0 for suit in Suit}
    points = {suit: 0 for suit in Suit}
    for c in hand:
        counts[c.suit] += 1
        points[c.suit] += card_value(c, c.suit)
    return {suit: counts[suit] * 2 + points[suit] * 0.1 for suit in Suit}


def decide_bid(
    hand: Sequence[Card],
    is_dealer: bool,
    rng: random.Random,
) -> Optional[Suit]:
    """Name the best suit if it is long and strong enough; the dealer always names one."""
    scores = suit_bid_scores(hand)

    best_suit: Optional[Suit] = None
    best_score = 0.0
    for suit in Suit:
        if scores[suit] > best_score:
            best_score = scores[suit]
            best_suit = suit

    if best_suit is not None:
        count = sum(1 for c in hand if c.suit == best_suit)
        if count >= MIN_CARDS_FOR_BID and best_score >= MIN_SCORE_FOR_BID:
            return best_suit

    if is_dealer:
        return best_suit if best_suit is not None else rng.choice(list(Suit))
    return None


def decide_declaration(cards: Sequence[Card], trump: Suit) -> List[Card]:
    best = best_combination(cards, trump)
    if best is None:
        return []
    return list(best[1])


def _highest(cards: Sequence[Card], trump: Suit) -> Card:
    best = cards[0]
    for c in cards[1:]:
        if card_value(c, trump) > card_value(best, trump):
            best = c
    return best


def _lowest(cards: Sequence[Card], trump: Suit) -> Card:
    best = cards[0]
    for c in cards[1:]:
        if card_value(c, trump) < card_value(best, trump):
            best = c
    return best


def decide_card(
    cards: Sequence[Card],
    trick_plays: Sequence[PlayedCard],
    trump: Suit,
    player_id: str = "",
) -> Card:
    """
    Choose a card to play among the legal ones.

    Leading: the highest trump, else the highest card. Following: the
    cheapest card that beats everything on the table, else the cheapest card.
    """
    legal = legal_cards(trick_plays, trump, cards)
    if not legal:
        raise NoLegalCardError(player_id=player_id, cards=list(cards))
    if len(legal) == 1:
        return legal[0]

    if not trick_plays:
        trumps = [c for c in legal if c.suit == trump]
        return _highest(trumps or legal, trump)

    winning = [
        c for c in legal
        if all(can_beat(c, played, trump) for _, played in trick_plays)
    ]
    return _lowest(winning or legal, trump)
