# belote_engine/transcript.py
from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional
import enum

from .cards import Card
from .events import Event
from .scoring import RoundScore
from .state import Declaration, GameState, PlayerState, TeamState, Trick

if TYPE_CHECKING:
    from .engine import BeloteGame


def _format_value(value: Any) -> str:
    if isinstance(value, Card):
        return str(value)
    if isinstance(value, PlayerState):
        return value.id
    if isinstance(value, TeamState):
        return f"{value.name} ({value.total})"
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, Trick):
        plays = ", ".join(f"{pid}: {card}" for pid, card in value.plays)
        return f"[{plays}]"
    if isinstance(value, Declaration):
        kind = value.combination.value if value.combination else "nothing"
        return f"{value.player_id} {kind}"
    if isinstance(value, RoundScore):
        return f"{value.team1} - {value.team2}"
    if isinstance(value, GameState):
        return f"{len(value.players)} players"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}: {_format_value(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    return str(value)


class TranscriptLogger:
    """Accumulates one line per notification of a game, written on flush()."""

    def __init__(self, path: Path, game_id: Optional[str] = None) -> None:
        self.path = Path(path)
        self.game_id = game_id
        self._entries: List[str] = []
        self._lock = Lock()

    def attach(self, game: "BeloteGame", game_id: Optional[str] = None) -> None:
        """Subscribe to every notification `game` can emit."""
        label = game_id or self.game_id
        for event in Event:
            game.on(event, self._listener(event, label))

    def _listener(self, event: Event, game_id: Optional[str]) -> Callable[..., None]:
        def record(**payload: Any) -> None:
            self.log_event(event, payload, game_id=game_id)

        return record

    def log_event(
        self,
        event: Event,
        payload: Dict[str, Any],
        *,
        game_id: Optional[str] = None,
    ) -> None:
        parts = [f"{key}={_format_value(value)}" for key, value in payload.items()]
        header = f"[{game_id}] " if game_id else ""
        entry = f"{header}{event.value}" + (f": {' '.join(parts)}" if parts else "")
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def flush(self) -> None:
        with self._lock:
            if not self._entries:
                return
            to_write = "\n".join(self._entries) + "\n"
            self._entries.clear()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(to_write)
