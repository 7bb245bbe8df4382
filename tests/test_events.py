# tests/test_events.py
import pytest

from belote_engine.events import EVENT_FIELDS, Event, EventEmitter


def test_every_event_has_a_payload_shape():
    assert set(EVENT_FIELDS) == set(Event)


def test_listeners_run_in_order_with_keyword_payload():
    emitter = EventEmitter()
    calls = []
    emitter.on(Event.BID_MADE, lambda player_id, suit: calls.append(("first", player_id)))
    emitter.on(Event.BID_MADE, lambda **payload: calls.append(("second", payload["suit"])))

    assert emitter.emit(Event.BID_MADE, player_id="p", suit=None)
    assert calls == [("first", "p"), ("second", None)]


def test_once_and_off():
    emitter = EventEmitter()
    calls = []

    def listener():
        calls.append(1)

    emitter.once(Event.ALL_PLAYERS_READY, listener)
    emitter.emit(Event.ALL_PLAYERS_READY)
    emitter.emit(Event.ALL_PLAYERS_READY)
    assert calls == [1]

    emitter.on(Event.NOT_ENOUGH_PLAYERS, listener)
    emitter.off(Event.NOT_ENOUGH_PLAYERS, listener)
    assert emitter.listener_count(Event.NOT_ENOUGH_PLAYERS) == 0
    assert emitter.emit(Event.NOT_ENOUGH_PLAYERS) is False


def test_remove_all_listeners():
    emitter = EventEmitter()
    emitter.on(Event.ALL_PLAYERS_READY, lambda: None)
    emitter.on(Event.NOT_ENOUGH_PLAYERS, lambda: None)
    emitter.remove_all_listeners(Event.ALL_PLAYERS_READY)
    assert emitter.listener_count(Event.ALL_PLAYERS_READY) == 0
    assert emitter.listener_count(Event.NOT_ENOUGH_PLAYERS) == 1
    emitter.remove_all_listeners()
    assert emitter.listener_count(Event.NOT_ENOUGH_PLAYERS) == 0


def test_payload_mismatch_is_rejected():
    emitter = EventEmitter()
    with pytest.raises(ValueError):
        emitter.emit(Event.BID_MADE, player_id="p")
    with pytest.raises(ValueError):
        emitter.emit(Event.ALL_PLAYERS_READY, extra=1)
