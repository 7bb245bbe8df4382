# tests/test_game_log.py
import csv

from belote_engine.config import GameOptions
from belote_engine.engine import BeloteGame
from belote_engine.game_log import (
    FIELDNAMES,
    build_round_score_rows,
    write_round_scores_csv,
)
from belote_engine.timers import VirtualScheduler
from belote_engine.transcript import TranscriptLogger


def _make_sample_game(seed: int = 321, transcript=None):
    scheduler = VirtualScheduler()
    game = BeloteGame(options=GameOptions(), rng_seed=seed, scheduler=scheduler)
    if transcript is not None:
        transcript.attach(game, "sample")
    for _ in range(4):
        game.add_bot()
    game.start_game()
    scheduler.run_until_idle()
    return game.game_state


def test_build_round_score_rows_basic():
    game_state = _make_sample_game()
    rows = build_round_score_rows(game_state, game_id="test-game")

    assert len(rows) == len(game_state.round_results) * 2
    for row in rows:
        assert set(row) == set(FIELDNAMES)
        assert row["game_id"] == "test-game"

    # last row per team carries the final total
    final = {row["team_id"]: row["total_score"] for row in rows}
    if rows:
        assert final == {1: game_state.team1.total, 2: game_state.team2.total}

    for result in game_state.round_results:
        round_rows = [r for r in rows if r["round_number"] == result.round_number]
        assert sum(r["round_score"] for r in round_rows) == sum(result.scores.values())
        assert sum(r["failed"] for r in round_rows) == (result.failed_team_id is not None)


def test_write_round_scores_csv(tmp_path):
    game_state = _make_sample_game(seed=9)
    path = tmp_path / "scores.csv"
    write_round_scores_csv(game_state, path, game_id="g1")

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        assert reader.fieldnames == FIELDNAMES
        rows = list(reader)

    assert len(rows) == len(game_state.round_results) * 2
    assert {r["team_name"] for r in rows} <= {"Team 1", "Team 2"}


def test_transcript_records_every_notification(tmp_path):
    path = tmp_path / "transcript.log"
    transcript = TranscriptLogger(path)
    _make_sample_game(seed=4, transcript=transcript)

    entries = transcript.entries
    assert entries[0].startswith("[sample] player_joined")
    assert any("game_started" in e for e in entries)
    assert entries[-1].startswith("[sample] game_ended")

    transcript.flush()
    assert transcript.entries == []
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == len(entries)


def test_rows_carry_the_recorded_winner():
    game_state = _make_sample_game(seed=11)
    rows = build_round_score_rows(game_state, game_id="g")

    assert game_state.winner_team_id in (1, 2)
    assert {row["winner_team_id"] for row in rows} <= {game_state.winner_team_id}
