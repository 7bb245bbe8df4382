# belote_engine/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Tuple

from dotenv import load_dotenv

# Load environment variables from a .env file if present.
load_dotenv()

TARGET_SCORES: Tuple[int, ...] = (501, 701, 1001)
MOVE_TIMES: Tuple[int, ...] = (10, 20, 30, 40, 50, 60)

ENV_TARGET_SCORE = "BELOTE_TARGET_SCORE"
ENV_MOVE_TIME = "BELOTE_MOVE_TIME"
ENV_BOT_DELAY_MS = "BELOTE_BOT_DELAY_MS"


@dataclass(frozen=True)
class GameOptions:
    """Construction-time settings of a game.

    target_score: cumulative score that ends the game.
    move_time: seconds a human seat has to act before the fallback fires.
    bot_delay_ms: simulated thinking time before a bot acts.
    """

    target_score: int = 501
    move_time: int = 30
    bot_delay_ms: int = 1000

    def __post_init__(self) -> None:
        if self.target_score not in TARGET_SCORES:
            raise ValueError(
                f"target_score must be one of {TARGET_SCORES}, got {self.target_score}"
            )
        if self.move_time not in MOVE_TIMES:
            raise ValueError(
                f"move_time must be one of {MOVE_TIMES}, got {self.move_time}"
            )
        if self.bot_delay_ms < 0:
            raise ValueError("bot_delay_ms must not be negative")

    @property
    def bot_delay_seconds(self) -> float:
        return self.bot_delay_ms / 1000.0

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameOptions":
        """Build options from BELOTE_* environment variables.

        Keyword overrides take precedence; unset values keep their defaults.
        """
        values: dict[str, Any] = {}
        for name, env_key in (
            ("target_score", ENV_TARGET_SCORE),
            ("move_time", ENV_MOVE_TIME),
            ("bot_delay_ms", ENV_BOT_DELAY_MS),
        ):
            raw = os.getenv(env_key)
            if raw is not None and raw.strip():
                try:
                    values[name] = int(raw)
                except ValueError as exc:
                    raise ValueError(f"{env_key} must be an integer, got {raw!r}") from exc

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown option: {key}")
            if value is not None:
                values[key] = value
        return cls(**values)

