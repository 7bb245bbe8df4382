# belote_engine/rules.py
from __future__ import annotations

from typing import List, Optional, Sequence

from .cards import Card, Suit, card_strength
from .state import PlayedCard, Trick


def can_beat(card: Card, target: Card, trump: Optional[Suit]) -> bool:
    """
    True if `card` would take the trick away from `target`.

    - Trump beats any non-trump card.
    - Within one suit the stronger card wins (trump table if that suit is trump).
    - Two different non-trump suits never beat each other.
    """
    card_is_trump = trump is not None and card.suit == trump
    target_is_trump = trump is not None and target.suit == trump

    if card_is_trump and not target_is_trump:
        return True
    if target_is_trump and not card_is_trump:
        return False
    if card.suit != target.suit:
        return False
    return card_strength(card, trump) > card_strength(target, trump)


def _strongest(cards: List[Card], trump: Optional[Suit]) -> Optional[Card]:
    best: Optional[Card] = None
    for c in cards:
        if best is None or card_strength(c, trump) > card_strength(best, trump):
            best = c
    return best


def highest_trump_in_trick(
    trick_plays: Sequence[PlayedCard], trump: Optional[Suit]
) -> Optional[Card]:
    if trump is None:
        return None
    return _strongest([c for _, c in trick_plays if c.suit == trump], trump)


def highest_of_suit_in_trick(
    trick_plays: Sequence[PlayedCard], suit: Suit, trump: Optional[Suit]
) -> Optional[Card]:
    return _strongest([c for _, c in trick_plays if c.suit == suit], trump)


def is_legal_play(
    card: Card,
    trick_plays: Sequence[PlayedCard],
    trump: Optional[Suit],
    cards: Sequence[Card],
) -> bool:
    """
    Decide whether `card` may be played now from `cards` (hand + talon).

    Rules, in priority order:
    - Leading a trick: anything goes.
    - Holding the led suit: must follow it. If the led suit is trump, must
      play a higher trump than the best one in the trick when able. If it is
      a plain suit and nobody has trumped yet, must play higher than the best
      card of that suit when able.
    - Void in the led suit but holding trump: must trump, overtaking the
      highest trump already played when able.
    - Holding neither: anything goes.
    """
    if not trick_plays:
        return True

    leading = trick_plays[0][1].suit

    if any(c.suit == leading for c in cards):
        if card.suit != leading:
            return False

        if leading == trump:
            to_beat = highest_trump_in_trick(trick_plays, trump)
        elif any(c.suit == trump for _, c in trick_plays):
            return True
        else:
            to_beat = highest_of_suit_in_trick(trick_plays, leading, trump)

        if to_beat is None or can_beat(card, to_beat, trump):
            return True
        return not any(
            c.suit == leading and can_beat(c, to_beat, trump) for c in cards
        )

    if trump is not None and any(c.suit == trump for c in cards):
        if card.suit != trump:
            return False

        to_beat = highest_trump_in_trick(trick_plays, trump)
        if to_beat is None or can_beat(card, to_beat, trump):
            return True
        return not any(
            c.suit == trump and can_beat(c, to_beat, trump) for c in cards
        )

    return True


def legal_cards(
    trick_plays: Sequence[PlayedCard],
    trump: Optional[Suit],
    cards: Sequence[Card],
) -> List[Card]:
    """Return every card of `cards` that is legal to play right now."""
    return [c for c in cards if is_legal_play(c, trick_plays, trump, cards)]


def find_legal_card(
    trick_plays: Sequence[PlayedCard],
    trump: Optional[Suit],
    cards: Sequence[Card],
) -> Optional[Card]:
    """First legal card in `cards` order, or None if `cards` is empty."""
    for c in cards:
        if is_legal_play(c, trick_plays, trump, cards):
            return c
    return None


def winner_of_trick(trick: Trick, trump: Optional[Suit]) -> PlayedCard:
    """
    Determine the winning play of a trick.

    The first play is the initial candidate; any later play that can beat the
    current candidate replaces it.
    """
    if not trick.plays:
        raise ValueError("Cannot determine winner of an empty trick")

    best = trick.plays[0]
    for play in trick.plays[1:]:
        if can_beat(play[1], best[1], trump):
            best = play
    return best
