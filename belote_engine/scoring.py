# belote_engine/scoring.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from .cards import Suit, cards_points
from .state import TRICKS_PER_ROUND, Trick

BASE_ROUND_POINTS = 162
LAST_TRICK_BONUS = 20
CLEAN_SWEEP_BONUS = 90


@dataclass
class RoundScore:
    team1: int
    team2: int
    # trick points per team before the majority rule and combination bonus
    card_points: Dict[int, int]
    combination_bonus: int = 0
    trump_caller_team: Optional[int] = None
    failed_team: Optional[int] = None

    def for_team(self, team_id: int) -> int:
        return self.team1 if team_id == 1 else self.team2

    @property
    def winning_team(self) -> int:
        return 1 if self.team1 > self.team2 else 2


def passing_score(total_points: int) -> int:
    """Strict majority of the round's pool."""
    return total_points // 2 + 1


def team_trick_points(
    tricks: Sequence[Trick],
    team_of: Mapping[str, int],
    trump: Suit,
) -> Dict[int, int]:
    """
    Card points per team, with the last-trick and clean-sweep bonuses.

    `tricks` are the round's completed tricks in play order.
    """
    points = {1: 0, 2: 0}
    won = {1: 0, 2: 0}
    for trick in tricks:
        if trick.winner_id is None:
            raise ValueError("Trick has no winner set")
        team_id = team_of[trick.winner_id]
        points[team_id] += cards_points([c for _, c in trick.plays], trump)
        won[team_id] += 1

    if tricks:
        points[team_of[tricks[-1].winner_id]] += LAST_TRICK_BONUS

    for team_id, count in won.items():
        if count == TRICKS_PER_ROUND:
            points[team_id] += CLEAN_SWEEP_BONUS

    return points


def score_round(
    tricks: Sequence[Trick],
    team_of: Mapping[str, int],
    trump: Suit,
    combination_bonus: int,
    trump_caller_team: Optional[int],
) -> RoundScore:
    """
    Score a finished round.

    The team that named trump must reach a strict majority of
    162 + combination bonus. If it does, it also collects the bonus; if it
    does not, it scores 0 and the opponents take the whole pool. With no
    trump caller the bonus is split evenly.
    """
    card_points = team_trick_points(tricks, team_of, trump)
    scores = dict(card_points)

    total = BASE_ROUND_POINTS + combination_bonus
    failed_team: Optional[int] = None

    if trump_caller_team in (1, 2):
        other = 2 if trump_caller_team == 1 else 1
        if scores[trump_caller_team] >= passing_score(total):
            scores[trump_caller_team] += combination_bonus
        else:
            scores[trump_caller_team] = 0
            scores[other] = total
            failed_team = trump_caller_team
    else:
        half = combination_bonus // 2
        scores[1] += half
        scores[2] += combination_bonus - half

    return RoundScore(
        team1=scores[1],
        team2=scores[2],
        card_points=card_points,
        combination_bonus=combination_bonus,
        trump_caller_team=trump_caller_team,
        failed_team=failed_team,
    )


def game_winner(totals: Mapping[int, int], target_score: int) -> Optional[int]:
    """Winning team id once either total reaches `target_score`, else None.

    A tie at or above the target goes to team 2.
    """
    if totals[1] < target_score and totals[2] < target_score:
        return None
    return 1 if totals[1] > totals[2] else 2
