# belote_engine/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List, Optional

from .state import GameState

FIELDNAMES = [
    "game_id",
    "round_number",
    "dealer_id",
    "trump_suit",
    "trump_caller_id",
    "team_id",
    "team_name",
    "card_points",
    "combination_bonus",
    "round_score",
    "total_score",
    "failed",
    "winner_team_id",
]


def build_round_score_rows(
    game_state: GameState,
    game_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round scores for CSV export.

    Each row corresponds to (round, team) and has keys in FIELDNAMES. A game
    ended by an instant win before any round was scored yields no rows.
    `winner_team_id` is repeated on every row and stays empty while the game
    is unfinished.
    """
    running_scores: Dict[int, int] = {1: 0, 2: 0}
    rows: List[Dict[str, Any]] = []

    for result in game_state.round_results:
        for team in game_state.teams:
            round_score = result.scores[team.id]
            running_scores[team.id] += round_score

            row: Dict[str, Any] = {
                "game_id": game_id,
                "round_number": result.round_number,
                "dealer_id": result.dealer_id,
                "trump_suit": result.trump.name if result.trump is not None else None,
                "trump_caller_id": result.trump_caller_id,
                "team_id": team.id,
                "team_name": team.name,
                "card_points": result.card_points.get(team.id, 0),
                "combination_bonus": result.combination_bonus,
                "round_score": round_score,
                "total_score": running_scores[team.id],
                "failed": result.failed_team_id == team.id,
                "winner_team_id": game_state.winner_team_id,
            }
            rows.append(row)

    return rows


def write_round_scores_csv(
    game_state: GameState,
    path,
    game_id: Optional[str] = None,
) -> None:
    """
    Write per-round scores to a CSV file.

    `path` can be a string or any path-like object accepted by `open`.
    """
    rows = build_round_score_rows(game_state, game_id=game_id)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
