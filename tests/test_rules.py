# tests/test_rules.py
import random

import pytest

from belote_engine.cards import Card, Rank, Suit, full_deck
from belote_engine.rules import (
    can_beat,
    find_legal_card,
    is_legal_play,
    legal_cards,
    winner_of_trick,
)
from belote_engine.state import Trick

H, D, C, S = Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES


def card(rank: Rank, suit: Suit) -> Card:
    return Card(suit, rank)


def test_trump_beats_plain_and_plain_suits_never_cross():
    assert can_beat(card(Rank.SEVEN, H), card(Rank.ACE, S), H)
    assert not can_beat(card(Rank.ACE, S), card(Rank.SEVEN, H), H)
    assert not can_beat(card(Rank.ACE, S), card(Rank.SEVEN, C), H)
    assert not can_beat(card(Rank.SEVEN, C), card(Rank.ACE, S), H)


def test_trump_order_jack_nine_ace():
    assert can_beat(card(Rank.JACK, H), card(Rank.NINE, H), H)
    assert can_beat(card(Rank.NINE, H), card(Rank.ACE, H), H)
    assert can_beat(card(Rank.ACE, H), card(Rank.TEN, H), H)
    assert not can_beat(card(Rank.ACE, H), card(Rank.NINE, H), H)


def test_plain_order_uses_points_then_rank():
    assert can_beat(card(Rank.TEN, S), card(Rank.KING, S), H)
    assert can_beat(card(Rank.ACE, S), card(Rank.TEN, S), H)
    assert can_beat(card(Rank.EIGHT, S), card(Rank.SEVEN, S), H)
    assert can_beat(card(Rank.JACK, S), card(Rank.NINE, S), H)


def test_can_beat_is_irreflexive_and_asymmetric():
    deck = full_deck()
    for trump in Suit:
        for a in deck:
            assert not can_beat(a, a, trump)
            for b in deck:
                assert not (can_beat(a, b, trump) and can_beat(b, a, trump))


def test_leading_allows_anything():
    cards = [card(Rank.ACE, S), card(Rank.SEVEN, H), card(Rank.KING, C)]
    assert legal_cards([], H, cards) == cards


def test_must_follow_and_raise_led_suit():
    trick = [("a", card(Rank.KING, S))]
    cards = [card(Rank.ACE, S), card(Rank.SEVEN, S), card(Rank.NINE, H)]
    assert legal_cards(trick, H, cards) == [card(Rank.ACE, S)]


def test_follow_suit_without_raise_when_unable():
    trick = [("a", card(Rank.ACE, S))]
    cards = [card(Rank.SEVEN, S), card(Rank.KING, S), card(Rank.ACE, H)]
    assert legal_cards(trick, H, cards) == [card(Rank.SEVEN, S), card(Rank.KING, S)]


def test_void_in_led_suit_must_trump():
    trick = [("a", card(Rank.ACE, S))]
    cards = [card(Rank.SEVEN, H), card(Rank.KING, C)]
    assert legal_cards(trick, H, cards) == [card(Rank.SEVEN, H)]


def test_must_overtrump_when_able():
    trick = [("a", card(Rank.ACE, S)), ("b", card(Rank.NINE, H))]
    cards = [card(Rank.JACK, H), card(Rank.SEVEN, H), card(Rank.KING, C)]
    assert legal_cards(trick, H, cards) == [card(Rank.JACK, H)]


def test_any_trump_when_cannot_overtrump():
    trick = [("a", card(Rank.ACE, S)), ("b", card(Rank.JACK, H))]
    cards = [card(Rank.SEVEN, H), card(Rank.EIGHT, H), card(Rank.KING, C)]
    assert legal_cards(trick, H, cards) == [card(Rank.SEVEN, H), card(Rank.EIGHT, H)]


def test_follow_suit_freely_after_someone_trumped():
    trick = [("a", card(Rank.KING, S)), ("b", card(Rank.SEVEN, H))]
    cards = [card(Rank.SEVEN, S), card(Rank.ACE, S), card(Rank.JACK, H)]
    assert legal_cards(trick, H, cards) == [card(Rank.SEVEN, S), card(Rank.ACE, S)]


def test_trump_lead_must_be_overtaken_when_able():
    trick = [("a", card(Rank.ACE, H))]
    cards = [card(Rank.SEVEN, H), card(Rank.NINE, H), card(Rank.ACE, S)]
    assert legal_cards(trick, H, cards) == [card(Rank.NINE, H)]


def test_holding_neither_suit_nor_trump_allows_anything():
    trick = [("a", card(Rank.ACE, S))]
    cards = [card(Rank.SEVEN, C), card(Rank.KING, D)]
    assert legal_cards(trick, H, cards) == cards
    assert is_legal_play(card(Rank.KING, D), trick, H, cards)


def test_find_legal_card():
    trick = [("a", card(Rank.ACE, S))]
    cards = [card(Rank.KING, C), card(Rank.SEVEN, H)]
    assert find_legal_card(trick, H, cards) == card(Rank.SEVEN, H)
    assert find_legal_card(trick, H, []) is None


def test_winner_of_trick():
    plays = [
        ("a", card(Rank.KING, S)),
        ("b", card(Rank.ACE, S)),
        ("c", card(Rank.SEVEN, H)),
        ("d", card(Rank.ACE, C)),
    ]
    assert winner_of_trick(Trick(plays=plays), H) == ("c", card(Rank.SEVEN, H))
    assert winner_of_trick(Trick(plays=plays), D) == ("b", card(Rank.ACE, S))

    with pytest.raises(ValueError):
        winner_of_trick(Trick(), H)


def test_random_deals_always_leave_a_legal_card():
    rng = random.Random(1234)
    for _ in range(200):
        deck = full_deck()
        rng.shuffle(deck)
        trump = rng.choice(list(Suit))
        hands = [deck[i * 8:(i + 1) * 8] for i in range(4)]
        leader = 0
        for _trick in range(8):
            trick = Trick()
            for offset in range(4):
                seat = (leader + offset) % 4
                legal = legal_cards(trick.plays, trump, hands[seat])
                assert legal
                chosen = rng.choice(legal)
                hands[seat].remove(chosen)
                trick.plays.append((str(seat), chosen))
            leader = int(winner_of_trick(trick, trump)[0])
        assert all(not hand for hand in hands)
