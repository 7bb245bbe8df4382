# belote_engine/events.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple
import enum


class Event(enum.Enum):
    # Seating.
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    PLAYER_SWITCHED_TEAM = "player_switched_team"
    PLAYER_READY_CHANGED = "player_ready_changed"
    ALL_PLAYERS_READY = "all_players_ready"
    NOT_ENOUGH_PLAYERS = "not_enough_players"

    # Game lifecycle.
    GAME_STARTED = "game_started"
    GAME_ENDED = "game_ended"
    ROUND_STARTED = "round_started"
    ROUND_COMPLETED = "round_completed"

    TIMER_UPDATE = "timer_update"

    # Dealing.
    INITIAL_CARDS_DEALT = "initial_cards_dealt"
    TALON_DEALT = "talon_dealt"

    # Bidding.
    BIDDING_STARTED = "bidding_started"
    BID_MADE = "bid_made"
    TRUMP_CHOSEN = "trump_chosen"
    NEXT_PLAYER_BID = "next_player_bid"

    # Declarations.
    CALLING_PHASE_STARTED = "calling_phase_started"
    CALL_MADE = "call_made"
    CALLING_PHASE_ENDED = "calling_phase_ended"
    BELOT_WIN = "belot_win"

    # Trick play.
    PLAYING_PHASE_STARTED = "playing_phase_started"
    CARD_PLAYED = "card_played"
    NEXT_PLAYER_MOVE = "next_player_move"
    TRICK_COMPLETED = "trick_completed"
    NEXT_TRICK_STARTED = "next_trick_started"

    ERROR = "error"


# Keyword arguments every listener of an event receives.
EVENT_FIELDS: Dict[Event, Tuple[str, ...]] = {
    Event.PLAYER_JOINED: ("player",),
    Event.PLAYER_LEFT: ("player_id",),
    Event.PLAYER_SWITCHED_TEAM: ("player_id", "team_id"),
    Event.PLAYER_READY_CHANGED: ("player_id", "is_ready"),
    Event.ALL_PLAYERS_READY: (),
    Event.NOT_ENOUGH_PLAYERS: (),
    Event.GAME_STARTED: ("state",),
    Event.GAME_ENDED: ("winner_team",),
    Event.ROUND_STARTED: ("round_number", "dealer"),
    Event.ROUND_COMPLETED: ("round_number", "scores", "winning_team", "failed_team"),
    Event.TIMER_UPDATE: ("time_left",),
    Event.INITIAL_CARDS_DEALT: ("card_counts",),
    Event.TALON_DEALT: ("talons",),
    Event.BIDDING_STARTED: ("player",),
    Event.BID_MADE: ("player_id", "suit"),
    Event.TRUMP_CHOSEN: ("suit", "player_id"),
    Event.NEXT_PLAYER_BID: ("player",),
    Event.CALLING_PHASE_STARTED: (),
    Event.CALL_MADE: ("player_id", "cards", "combination"),
    Event.CALLING_PHASE_ENDED: ("winning_declaration",),
    Event.BELOT_WIN: ("player_id", "suit"),
    Event.PLAYING_PHASE_STARTED: (),
    Event.CARD_PLAYED: ("player_id", "card"),
    Event.NEXT_PLAYER_MOVE: ("player",),
    Event.TRICK_COMPLETED: ("trick", "winner_id"),
    Event.NEXT_TRICK_STARTED: ("player",),
    Event.ERROR: ("error", "action"),
}

Listener = Callable[..., Any]


class EventEmitter:
    """
    Observer registry over the fixed `Event` vocabulary.

    Listeners run synchronously, in registration order, with the payload of
    `EVENT_FIELDS[event]` as keyword arguments.
    """

    def __init__(self) -> None:
        self._listeners: Dict[Event, List[Tuple[Listener, bool]]] = {}

    def on(self, event: Event, listener: Listener) -> None:
        self._listeners.setdefault(Event(event), []).append((listener, False))

    def once(self, event: Event, listener: Listener) -> None:
        self._listeners.setdefault(Event(event), []).append((listener, True))

    def off(self, event: Event, listener: Listener) -> None:
        entries = self._listeners.get(Event(event), [])
        for i, (registered, _) in enumerate(entries):
            if registered == listener:
                del entries[i]
                return

    def remove_all_listeners(self, event: Event | None = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(Event(event), None)

    def listener_count(self, event: Event) -> int:
        return len(self._listeners.get(Event(event), []))

    def emit(self, event: Event, **payload: Any) -> bool:
        """Call every listener of `event`. Returns True if any was called."""
        expected = EVENT_FIELDS[event]
        if set(payload) != set(expected):
            raise ValueError(
                f"Payload for {event.value} must have fields {expected}, "
                f"got {tuple(payload)}"
            )

        entries = self._listeners.get(event)
        if not entries:
            return False

        snapshot = list(entries)
        entries[:] = [entry for entry in entries if not entry[1]]
        for listener, _ in snapshot:
            listener(**payload)
        return True
