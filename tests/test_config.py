# tests/test_config.py
import pytest

from belote_engine.config import (
    ENV_BOT_DELAY_MS,
    ENV_MOVE_TIME,
    ENV_TARGET_SCORE,
    GameOptions,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (ENV_TARGET_SCORE, ENV_MOVE_TIME, ENV_BOT_DELAY_MS):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    options = GameOptions()
    assert options.target_score == 501
    assert options.move_time == 30
    assert options.bot_delay_ms == 1000
    assert options.bot_delay_seconds == 1.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"target_score": 500},
        {"move_time": 15},
        {"move_time": 0},
        {"bot_delay_ms": -1},
    ],
)
def test_invalid_options_are_rejected(kwargs):
    with pytest.raises(ValueError):
        GameOptions(**kwargs)


def test_from_env_reads_variables(monkeypatch):
    monkeypatch.setenv(ENV_TARGET_SCORE, "1001")
    monkeypatch.setenv(ENV_MOVE_TIME, "60")
    monkeypatch.setenv(ENV_BOT_DELAY_MS, "0")

    options = GameOptions.from_env()
    assert options == GameOptions(target_score=1001, move_time=60, bot_delay_ms=0)


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.setenv(ENV_TARGET_SCORE, "1001")
    options = GameOptions.from_env(target_score=701, move_time=None)
    assert options.target_score == 701
    assert options.move_time == 30


def test_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv(ENV_MOVE_TIME, "soon")
    with pytest.raises(ValueError):
        GameOptions.from_env()

    monkeypatch.setenv(ENV_MOVE_TIME, "25")
    with pytest.raises(ValueError):
        GameOptions.from_env()


def test_from_env_rejects_unknown_option():
    with pytest.raises(TypeError):
        GameOptions.from_env(target=501)
