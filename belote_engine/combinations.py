# belote_engine/combinations.py
from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .cards import RANK_ORDER, Card, Rank, Suit, plain_strength
from .state import Combination, Declaration

# Points a combination adds to the round's pool. BELOT ends the game instead.
COMBINATION_POINTS: Dict[Combination, int] = {
    Combination.SEQUENCE_3: 20,
    Combination.SEQUENCE_4: 50,
    Combination.SEQUENCE_5: 100,
    Combination.SEQUENCE_6: 100,
    Combination.SEQUENCE_7: 100,
    Combination.BELA: 20,
    Combination.FOUR_ACES: 100,
    Combination.FOUR_KINGS: 100,
    Combination.FOUR_QUEENS: 100,
    Combination.FOUR_TENS: 100,
    Combination.FOUR_NINES: 150,
    Combination.FOUR_JACKS: 200,
    Combination.BELOT: 0,
}

# Cross-kind strength, low to high. Sequences of 5..7 share one tier.
COMBINATION_STRENGTH: Dict[Combination, int] = {
    Combination.SEQUENCE_3: 1,
    Combination.SEQUENCE_4: 2,
    Combination.SEQUENCE_5: 3,
    Combination.SEQUENCE_6: 3,
    Combination.SEQUENCE_7: 3,
    Combination.BELA: 4,
    Combination.FOUR_ACES: 5,
    Combination.FOUR_KINGS: 6,
    Combination.FOUR_QUEENS: 7,
    Combination.FOUR_TENS: 8,
    Combination.FOUR_NINES: 9,
    Combination.FOUR_JACKS: 10,
    Combination.BELOT: 11,
}

FOUR_OF_A_KIND: Dict[Rank, Combination] = {
    Rank.JACK: Combination.FOUR_JACKS,
    Rank.NINE: Combination.FOUR_NINES,
    Rank.ACE: Combination.FOUR_ACES,
    Rank.KING: Combination.FOUR_KINGS,
    Rank.QUEEN: Combination.FOUR_QUEENS,
    Rank.TEN: Combination.FOUR_TENS,
}

SEQUENCES: Dict[int, Combination] = {
    3: Combination.SEQUENCE_3,
    4: Combination.SEQUENCE_4,
    5: Combination.SEQUENCE_5,
    6: Combination.SEQUENCE_6,
    7: Combination.SEQUENCE_7,
}

# Largest hand + talon a seat ever holds.
MAX_PLAYABLE_CARDS = 10


def is_sequence(cards: Sequence[Card]) -> bool:
    """True if all cards share a suit and their ranks form a contiguous run."""
    if not cards:
        return False
    if any(c.suit != cards[0].suit for c in cards):
        return False
    positions = sorted(RANK_ORDER.index(c.rank) for c in cards)
    return all(b == a + 1 for a, b in zip(positions, positions[1:]))


def classify(cards: Sequence[Card], trump: Suit) -> Optional[Combination]:
    """
    Classify a card subset as a declarable combination, or None.

    The subset must be exactly the combination: extra cards disqualify it.
    """
    n = len(cards)
    if n == 0 or len(set(cards)) != n:
        return None

    if n == 8 and all(c.suit == cards[0].suit for c in cards):
        return Combination.BELOT

    if n == 2 and {c.rank for c in cards} == {Rank.KING, Rank.QUEEN}:
        if all(c.suit == trump for c in cards):
            return Combination.BELA
        return None

    if n == 4 and len({c.rank for c in cards}) == 1:
        return FOUR_OF_A_KIND.get(cards[0].rank)

    if n in SEQUENCES and is_sequence(cards):
        return SEQUENCES[n]

    return None


def combination_points(combination: Optional[Combination]) -> int:
    if combination is None:
        return 0
    return COMBINATION_POINTS[combination]


def declaration_key(
    combination: Combination, cards: Sequence[Card]
) -> Tuple[int, Tuple[int, int]]:
    """Sort key for comparing two declarations (higher is stronger)."""
    tie_break = (0, 0)
    if combination in SEQUENCES.values() and cards:
        tie_break = max(plain_strength(c) for c in cards)
    return COMBINATION_STRENGTH[combination], tie_break


def compare_declarations(first: Declaration, second: Declaration) -> int:
    """Positive if `first` is stronger, negative if weaker, 0 if equal."""
    if first.combination is None or second.combination is None:
        return (first.combination is not None) - (second.combination is not None)
    key1 = declaration_key(first.combination, first.cards)
    key2 = declaration_key(second.combination, second.cards)
    return (key1 > key2) - (key1 < key2)


def highest_declaration(declarations: Sequence[Declaration]) -> Optional[Declaration]:
    """Strongest real declaration; the earliest one wins an exact tie."""
    best: Optional[Declaration] = None
    for decl in declarations:
        if decl.combination is None:
            continue
        if best is None or compare_declarations(decl, best) > 0:
            best = decl
    return best


def iter_subsets(cards: Sequence[Card]) -> Iterator[List[Card]]:
    """Every non-empty subset of `cards`, by bitmask, in ascending mask order."""
    n = len(cards)
    for mask in range(1, 1 << n):
        yield [cards[j] for j in range(n) if mask & (1 << j)]


def find_all_combinations(
    cards: Sequence[Card], trump: Suit
) -> List[Tuple[Combination, List[Card]]]:
    """All (combination, subset) pairs a seat holding `cards` could declare."""
    if len(cards) > MAX_PLAYABLE_CARDS:
        raise ValueError(
            f"Cannot enumerate combinations over {len(cards)} cards "
            f"(max {MAX_PLAYABLE_CARDS})"
        )
    found: List[Tuple[Combination, List[Card]]] = []
    for subset in iter_subsets(cards):
        combination = classify(subset, trump)
        if combination is not None:
            found.append((combination, subset))
    return found


def best_combination(
    cards: Sequence[Card], trump: Suit
) -> Optional[Tuple[Combination, List[Card]]]:
    """The single strongest combination held in `cards`, or None."""
    best: Optional[Tuple[Combination, List[Card]]] = None
    best_key = None
    for combination, subset in find_all_combinations(cards, trump):
        key = declaration_key(combination, subset)
        if combination == Combination.BELOT:
            return combination, subset
        if best_key is None or key > best_key:
            best, best_key = (combination, subset), key
    return best


def resolve_declarations(
    declarations: Sequence[Declaration],
    team_of: Mapping[str, int],
    trump_caller_team: Optional[int],
) -> Optional[Declaration]:
    """
    Pick the single winning declaration of the round.

    Each team's strongest declaration is compared; an exact tie goes to the
    team that named trump (team 2 if nobody did). The losing team's
    declarations are discarded.
    """
    team1_best = highest_declaration(
        [d for d in declarations if team_of.get(d.player_id) == 1]
    )
    team2_best = highest_declaration(
        [d for d in declarations if team_of.get(d.player_id) == 2]
    )

    if team1_best is None:
        return team2_best
    if team2_best is None:
        return team1_best

    comparison = compare_declarations(team1_best, team2_best)
    if comparison > 0:
        return team1_best
    if comparison < 0:
        return team2_best
    return team1_best if trump_caller_team == 1 else team2_best
