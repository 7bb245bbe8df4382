# tests/test_scoring.py
import pytest

from belote_engine.cards import Suit, full_deck
from belote_engine.scoring import (
    BASE_ROUND_POINTS,
    game_winner,
    passing_score,
    score_round,
    team_trick_points,
)
from belote_engine.state import Trick

TEAM_OF = {"a": 1, "b": 2, "c": 1, "d": 2}

# full_deck() is suit-major (hearts, diamonds, clubs, spades), ranks ascending,
# so with hearts as trump the eight tricks below are worth
# 24, 38, 10, 20, 10, 20, 10, 20 card points.
TRICK_POINTS_HEARTS = [24, 38, 10, 20, 10, 20, 10, 20]


def _tricks(winners):
    deck = full_deck()
    tricks = []
    for i, winner in enumerate(winners):
        cards = deck[i * 4:(i + 1) * 4]
        plays = list(zip(["a", "b", "c", "d"], cards))
        tricks.append(Trick(plays=plays, winner_id=winner, winning_card=cards[0]))
    return tricks


# team 1 takes tricks 0, 1, 3, 5 (102); team 2 takes 2, 4, 6, 7 (50 + last trick)
SPLIT = ["a", "c", "b", "a", "d", "c", "b", "d"]


def test_passing_score_is_strict_majority():
    assert passing_score(BASE_ROUND_POINTS) == 82
    assert passing_score(182) == 92
    assert passing_score(163) == 82


def test_team_trick_points_with_last_trick_bonus():
    points = team_trick_points(_tricks(SPLIT), TEAM_OF, Suit.HEARTS)
    assert points == {1: 102, 2: 70}


def test_clean_sweep_bonus():
    points = team_trick_points(_tricks(["a"] * 8), TEAM_OF, Suit.HEARTS)
    assert points == {1: 152 + 20 + 90, 2: 0}


def test_trick_without_winner_is_rejected():
    tricks = _tricks(SPLIT)
    tricks[3].winner_id = None
    with pytest.raises(ValueError):
        team_trick_points(tricks, TEAM_OF, Suit.HEARTS)


def test_trump_caller_passing_keeps_points_and_bonus():
    score = score_round(_tricks(SPLIT), TEAM_OF, Suit.HEARTS, 20, 1)
    assert (score.team1, score.team2) == (122, 70)
    assert score.failed_team is None
    assert score.card_points == {1: 102, 2: 70}
    assert score.winning_team == 1


def test_trump_caller_failing_scores_zero():
    score = score_round(_tricks(SPLIT), TEAM_OF, Suit.HEARTS, 0, 2)
    assert (score.team1, score.team2) == (BASE_ROUND_POINTS, 0)
    assert score.failed_team == 2
    assert score.for_team(2) == 0


def test_combination_bonus_raises_the_bar():
    # 102 clears 82 but not floor(212 / 2) + 1 = 107
    score = score_round(_tricks(SPLIT), TEAM_OF, Suit.HEARTS, 50, 1)
    assert (score.team1, score.team2) == (0, BASE_ROUND_POINTS + 50)
    assert score.failed_team == 1
    assert score.winning_team == 2


def test_bonus_split_without_trump_caller():
    score = score_round(_tricks(SPLIT), TEAM_OF, Suit.HEARTS, 20, None)
    assert (score.team1, score.team2) == (112, 80)
    assert score.failed_team is None


def test_game_winner():
    assert game_winner({1: 400, 2: 300}, 501) is None
    assert game_winner({1: 510, 2: 300}, 501) == 1
    assert game_winner({1: 520, 2: 530}, 501) == 2
    assert game_winner({1: 510, 2: 510}, 501) == 2
    assert game_winner({1: 300, 2: 710}, 701) == 2
