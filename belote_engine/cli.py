# belote_engine/cli.py
from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import random
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from .agents import HeuristicAgent, RandomBeloteAgent
from .config import TARGET_SCORES, GameOptions
from .engine import BeloteGame
from .events import Event
from .game_log import FIELDNAMES, build_round_score_rows
from .paths import ensure_results_dir, resolve_results_path
from .state import NUM_SEATS
from .timers import VirtualScheduler
from .transcript import TranscriptLogger

OPPONENTS = ("heuristic", "random")


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Run all-bot Belote games on a virtual clock and log per-round "
            "team scores to a CSV file."
        )
    )

    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of full games to play (default: 1).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base random seed; game i uses seed + i.",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default="belote_scores.csv",
        help="Path to the output CSV file (default: belote_scores.csv).",
    )
    parser.add_argument(
        "--target-score",
        type=int,
        choices=TARGET_SCORES,
        default=None,
        help="Score that ends a game (default: BELOTE_TARGET_SCORE or 501).",
    )
    parser.add_argument(
        "--opponent",
        choices=OPPONENTS,
        default="heuristic",
        help="Agent playing the team 2 seats (team 1 is always heuristic).",
    )
    parser.add_argument(
        "--transcript",
        type=str,
        default=None,
        help="Optional path for a notification-by-notification transcript.",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Optional PNG path for a plot of mean total scores per round.",
    )
    parser.add_argument(
        "--parallel-games",
        type=int,
        default=4,
        help="Max number of games to play concurrently (default: 4).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO.",
    )

    return parser.parse_args(argv)


def _play_single_game(
    game_index: int,
    *,
    args: argparse.Namespace,
    transcript: Optional[TranscriptLogger],
) -> Tuple[List[Dict[str, Any]], Optional[int], str]:
    """Run one game synchronously (meant for thread execution)."""
    game_id = f"game-{game_index}"
    seed = args.seed + game_index

    options = GameOptions.from_env(target_score=args.target_score)
    scheduler = VirtualScheduler()
    game = BeloteGame(
        options=options,
        rng_seed=seed,
        scheduler=scheduler,
        game_label=game_id,
    )

    errors: List[Tuple[str, Exception]] = []
    game.on(Event.ERROR, lambda error, action: errors.append((action, error)))
    if transcript is not None:
        transcript.attach(game, game_id)

    for seat in range(NUM_SEATS):
        agent_rng = random.Random(seed * 1000 + seat)
        team_id = 1 if seat % 2 == 0 else 2
        if team_id == 2 and args.opponent == "random":
            agent = RandomBeloteAgent(rng=agent_rng)
        else:
            agent = HeuristicAgent(rng=agent_rng)
        game.add_bot(f"{type(agent).__name__} {seat + 1}", team_id=team_id, agent=agent)

    try:
        game.start_game()
        scheduler.run_until_idle()
    finally:
        game.destroy()

    if errors:
        action, error = errors[0]
        raise RuntimeError(f"{game_id} failed during {action}: {error}") from error
    if not game.game_state.is_game_over:
        raise RuntimeError(f"{game_id} stopped before reaching a result")

    rows = build_round_score_rows(game.game_state, game_id=game_id)
    return rows, game.game_state.winner_team_id, game_id


async def _play_single_game_async(
    game_index: int,
    *,
    args: argparse.Namespace,
    transcript: Optional[TranscriptLogger],
) -> Tuple[List[Dict[str, Any]], Optional[int], str]:
    return await asyncio.to_thread(
        _play_single_game,
        game_index,
        args=args,
        transcript=transcript,
    )


async def async_main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    ensure_results_dir()

    csv_path = resolve_results_path(args.csv)
    transcript_path = (
        resolve_results_path(args.transcript) if args.transcript else None
    )

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.games < 1:
        raise SystemExit(f"--games must be at least 1; got {args.games}.")
    parallel_games = max(1, min(args.parallel_games, args.games))

    logging.info("Games to play: %d (team 2: %s)", args.games, args.opponent)
    logging.info("Output CSV: %s", csv_path)
    if transcript_path:
        logging.info("Transcript: %s", transcript_path)
    logging.info("Running up to %d game(s) concurrently", parallel_games)

    transcript = TranscriptLogger(transcript_path) if transcript_path else None

    all_rows: List[Dict[str, Any]] = []
    wins: Counter = Counter()
    failures = 0

    for batch_start in range(0, args.games, parallel_games):
        batch_indices = list(range(batch_start, min(batch_start + parallel_games, args.games)))
        tasks = [
            asyncio.create_task(
                _play_single_game_async(game_index, args=args, transcript=transcript)
            )
            for game_index in batch_indices
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logging.error("Game task failed: %s", result)
                failures += 1
                continue

            rows, winner_team_id, game_id = result
            all_rows.extend(rows)
            wins[winner_team_id] += 1
            logging.info("Finished %s: team %s wins", game_id, winner_team_id)

    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in all_rows:
            writer.writerow(row)

    logging.info(
        "Finished %d/%d games (team 1: %d wins, team 2: %d wins); wrote %d rows to %s",
        args.games - failures,
        args.games,
        wins[1],
        wins[2],
        len(all_rows),
        csv_path,
    )

    if transcript:
        transcript.flush()
    if args.plot and all_rows:
        from .results.summary import plot_total_scores

        plot_path = plot_total_scores(csv_path, resolve_results_path(args.plot))
        logging.info("Wrote plot to %s", plot_path)


def main(argv: List[str] | None = None) -> None:
    asyncio.run(async_main(argv))


if __name__ == "__main__":
    main()

'''
python3 -m belote_engine.cli --games 20 --seed 1 --csv heuristic_vs_random.csv \
  --opponent random --transcript heuristic_vs_random.log --plot heuristic_vs_random.png
'''
