# belote_engine/timers.py
from __future__ import annotations

import asyncio
import heapq
import logging
from typing import Any, Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs callbacks after a delay on the orchestrator's thread of control."""

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        ...


class AsyncioScheduler:
    """
    Schedules on an asyncio event loop.

    With no explicit loop, the loop running at scheduling time is used, so the
    game must be driven from inside a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)


class VirtualHandle:
    __slots__ = ("due", "seq", "callback", "cancelled")

    def __init__(self, due: float, seq: int, callback: Callback) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: "VirtualHandle") -> bool:
        return (self.due, self.seq) < (other.due, other.seq)


class VirtualScheduler:
    """
    Deterministic scheduler over a virtual clock.

    Nothing runs until `advance` or `run_until_idle` is called; callbacks
    then fire in (due time, scheduling order) order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[VirtualHandle] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callback) -> VirtualHandle:
        self._seq += 1
        handle = VirtualHandle(self.now + max(0.0, delay), self._seq, callback)
        heapq.heappush(self._queue, handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)

    def _pop_due(self, until: Optional[float]) -> Optional[VirtualHandle]:
        while self._queue:
            head = self._queue[0]
            if head.cancelled:
                heapq.heappop(self._queue)
                continue
            if until is not None and head.due > until:
                return None
            return heapq.heappop(self._queue)
        return None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing everything that falls due. Returns count fired."""
        until = self.now + seconds
        fired = 0
        while True:
            handle = self._pop_due(until)
            if handle is None:
                break
            self.now = max(self.now, handle.due)
            handle.callback()
            fired += 1
        self.now = until
        return fired

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Fire callbacks until the queue is empty. Returns count fired."""
        fired = 0
        while True:
            handle = self._pop_due(None)
            if handle is None:
                return fired
            if fired >= max_callbacks:
                raise RuntimeError(
                    f"Scheduler still busy after {max_callbacks} callbacks"
                )
            self.now = max(self.now, handle.due)
            handle.callback()
            fired += 1


class TurnTimer:
    """
    Countdown for one turn: ticks once per second, then fires `on_timeout`.

    At most one of these is live per game; the owner cancels the previous
    timer before starting the next.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        duration: int,
        on_tick: Callable[[int], Any],
        on_timeout: Callback,
    ) -> None:
        self.scheduler = scheduler
        self.duration = duration
        self.time_left = duration
        self._on_tick = on_tick
        self._on_timeout = on_timeout
        self._tick_handle: Optional[TimerHandle] = None
        self._timeout_handle: Optional[TimerHandle] = None
        self.active = False

    def start(self) -> "TurnTimer":
        self.active = True
        self.time_left = self.duration
        self._timeout_handle = self.scheduler.call_later(self.duration, self._expire)
        self._schedule_tick()
        return self

    def _schedule_tick(self) -> None:
        if self.time_left > 0:
            self._tick_handle = self.scheduler.call_later(1.0, self._tick)

    def _tick(self) -> None:
        if not self.active:
            return
        self.time_left = max(0, self.time_left - 1)
        self._on_tick(self.time_left)
        self._schedule_tick()

    def _expire(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        if self.time_left > 0:
            self.time_left = 0
            self._on_tick(0)
        logger.debug("Turn timer of %ss expired", self.duration)
        self._on_timeout()

    def cancel(self) -> None:
        self.active = False
        for handle in (self._tick_handle, self._timeout_handle):
            if handle is not None:
                handle.cancel()
        self._tick_handle = None
        self._timeout_handle = None
