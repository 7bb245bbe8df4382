# tests/test_combinations.py
import random

import pytest

from belote_engine.cards import Card, Rank, Suit, full_deck
from belote_engine.combinations import (
    best_combination,
    classify,
    combination_points,
    compare_declarations,
    declaration_key,
    find_all_combinations,
    resolve_declarations,
)
from belote_engine.state import Combination, Declaration

H, D, C, S = Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES


def cards_of(suit, *ranks):
    return [Card(suit, r) for r in ranks]


def test_classify_sequences_in_any_order():
    assert classify(cards_of(S, Rank.SEVEN, Rank.EIGHT, Rank.NINE), H) == Combination.SEQUENCE_3
    assert classify(cards_of(S, Rank.NINE, Rank.SEVEN, Rank.EIGHT), H) == Combination.SEQUENCE_3
    assert (
        classify(cards_of(D, Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE), H)
        == Combination.SEQUENCE_5
    )
    run7 = cards_of(C, Rank.EIGHT, Rank.NINE, Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE)
    assert classify(run7, H) == Combination.SEQUENCE_7


def test_classify_rejects_gaps_mixed_suits_and_extras():
    assert classify(cards_of(S, Rank.SEVEN, Rank.EIGHT, Rank.TEN), H) is None
    mixed = cards_of(S, Rank.SEVEN, Rank.EIGHT) + cards_of(C, Rank.NINE)
    assert classify(mixed, H) is None
    extra = cards_of(S, Rank.SEVEN, Rank.EIGHT, Rank.NINE) + [Card(H, Rank.KING)]
    assert classify(extra, H) is None
    assert classify([Card(S, Rank.SEVEN)] * 3, H) is None
    assert classify([], H) is None


def test_classify_bela_only_in_trump():
    pair = cards_of(H, Rank.KING, Rank.QUEEN)
    assert classify(pair, H) == Combination.BELA
    assert classify(pair, S) is None


def test_classify_four_of_a_kind():
    jacks = [Card(s, Rank.JACK) for s in Suit]
    nines = [Card(s, Rank.NINE) for s in Suit]
    eights = [Card(s, Rank.EIGHT) for s in Suit]
    assert classify(jacks, H) == Combination.FOUR_JACKS
    assert classify(nines, H) == Combination.FOUR_NINES
    assert classify(eights, H) is None


def test_classify_belot():
    spades = [c for c in full_deck() if c.suit == S]
    assert classify(spades, H) == Combination.BELOT


def test_classify_is_idempotent():
    rng = random.Random(5)
    deck = full_deck()
    for _ in range(300):
        subset = rng.sample(deck, rng.randint(1, 8))
        trump = rng.choice(list(Suit))
        assert classify(subset, trump) == classify(list(subset), trump)


def test_combination_points_table():
    assert combination_points(None) == 0
    assert combination_points(Combination.SEQUENCE_3) == 20
    assert combination_points(Combination.SEQUENCE_4) == 50
    assert combination_points(Combination.SEQUENCE_6) == 100
    assert combination_points(Combination.BELA) == 20
    assert combination_points(Combination.FOUR_ACES) == 100
    assert combination_points(Combination.FOUR_NINES) == 150
    assert combination_points(Combination.FOUR_JACKS) == 200


def test_best_combination_prefers_strongest_kind():
    hand = [Card(s, Rank.JACK) for s in Suit] + cards_of(
        S, Rank.SEVEN, Rank.EIGHT, Rank.NINE, Rank.TEN
    )
    combination, subset = best_combination(hand, C)
    assert combination == Combination.FOUR_JACKS
    assert sorted(subset, key=str) == sorted([Card(s, Rank.JACK) for s in Suit], key=str)


def test_best_combination_none_and_belot():
    hand = [
        Card(S, Rank.SEVEN),
        Card(D, Rank.NINE),
        Card(C, Rank.JACK),
        Card(H, Rank.ACE),
        Card(S, Rank.KING),
        Card(D, Rank.SEVEN),
    ]
    assert best_combination(hand, C) is None

    diamonds = [c for c in full_deck() if c.suit == D]
    combination, subset = best_combination(diamonds + [Card(S, Rank.ACE)], H)
    assert combination == Combination.BELOT
    assert set(subset) == set(diamonds)


def test_best_combination_is_subset_exhaustive():
    rng = random.Random(11)
    deck = full_deck()
    for _ in range(100):
        hand = rng.sample(deck, 8)
        trump = rng.choice(list(Suit))
        found = find_all_combinations(hand, trump)
        best = best_combination(hand, trump)
        if not found:
            assert best is None
            continue
        top = max(declaration_key(kind, subset) for kind, subset in found)
        assert declaration_key(best[0], best[1]) == top


def test_find_all_combinations_bounds_input():
    with pytest.raises(ValueError):
        find_all_combinations(full_deck()[:11], H)


def test_sequence_tie_break_uses_highest_card():
    high = Declaration("a", Combination.SEQUENCE_3, tuple(cards_of(S, Rank.QUEEN, Rank.KING, Rank.ACE)))
    low = Declaration("b", Combination.SEQUENCE_3, tuple(cards_of(S, Rank.SEVEN, Rank.EIGHT, Rank.NINE)))
    assert compare_declarations(high, low) > 0
    assert compare_declarations(low, high) < 0

    nothing = Declaration("c", None)
    assert compare_declarations(low, nothing) > 0


def test_resolve_declarations_between_teams():
    team_of = {"a": 1, "b": 2, "c": 1, "d": 2}
    seq_spades = Declaration("a", Combination.SEQUENCE_3, tuple(cards_of(S, Rank.SEVEN, Rank.EIGHT, Rank.NINE)))
    seq_hearts = Declaration("b", Combination.SEQUENCE_3, tuple(cards_of(H, Rank.SEVEN, Rank.EIGHT, Rank.NINE)))
    bela = Declaration("d", Combination.BELA, tuple(cards_of(C, Rank.KING, Rank.QUEEN)))
    empty = Declaration("c", None)

    assert resolve_declarations([seq_spades, bela, empty], team_of, 1) == bela
    # exact tie goes to the trump caller, team 2 if nobody called
    assert resolve_declarations([seq_spades, seq_hearts], team_of, 1) == seq_spades
    assert resolve_declarations([seq_spades, seq_hearts], team_of, 2) == seq_hearts
    assert resolve_declarations([seq_spades, seq_hearts], team_of, None) == seq_hearts
    assert resolve_declarations([empty, Declaration("b", None)], team_of, 1) is None
