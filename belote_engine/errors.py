# belote_engine/errors.py
from __future__ import annotations


class BeloteError(Exception):
    """Base class for every error reported to the caller of a game action."""


class SetupError(BeloteError, ValueError):
    """Seating problems: table full, duplicate id, bad team, not ready."""


class TurnOrderError(BeloteError, ValueError):
    """Action submitted in the wrong phase or by a seat not on turn."""


class RuleViolation(BeloteError, ValueError):
    """Action that breaks a rule of the game (illegal card, dealer pass, ...)."""


class NoLegalCardError(RuntimeError):
    """Raised when a non-empty hand yields no legal card: a broken invariant."""

    def __init__(self, *, player_id: str, cards: object) -> None:
        super().__init__(f"No legal card for {player_id} holding {cards}")
        self.player_id = player_id
