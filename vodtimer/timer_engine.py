from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from vodtimer.api.models import Event, TimerSnapshot, TimerStatus
from vodtimer.fsm import TimerFSM
from vodtimer.today_queue import duration_seconds, format_hms

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[TimerSnapshot], None]


def _countdown_for(event: Event) -> int:
    # Stored rows may predate the offset-order check; never count below zero.
    return max(0, duration_seconds(event))


class TickScheduler(Protocol):
    """Periodic source of `tick()` calls.

    At most one live handle: `arm` while armed is a no-op; `cancel` while not
    armed is a no-op.
    """

    @property
    def armed(self) -> bool: ...

    def arm(self, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class TimerEngine:
    """Countdown that walks a queue of events in order.

    All transitions are total: a request the current status doesn't allow is
    a no-op. After every change the tick scheduler is armed if the engine is
    running and cancelled otherwise, then listeners get a fresh snapshot.
    """

    def __init__(self, *, scheduler: TickScheduler | None = None) -> None:
        self._fsm = TimerFSM()
        self.scheduler = scheduler
        self.queue: list[Event] = []
        self.current_index = 0
        self.remaining_seconds = 0
        self._listeners: list[SnapshotListener] = []

    @property
    def status(self) -> TimerStatus:
        return self._fsm.status

    @property
    def current_event(self) -> Event | None:
        if 0 <= self.current_index < len(self.queue):
            return self.queue[self.current_index]
        return None

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            queue=list(self.queue),
            current_index=self.current_index,
            remaining_seconds=self.remaining_seconds,
            status=self.status,
            current_event=self.current_event,
            display_time=format_hms(self.remaining_seconds),
        )

    def load_queue(self, queue: Sequence[Event]) -> None:
        self.queue = list(queue)
        self.current_index = 0
        self.remaining_seconds = _countdown_for(self.queue[0]) if self.queue else 0
        self._fsm.try_send("reload")
        self._changed()

    def start(self) -> None:
        if not self.queue or self.status not in (TimerStatus.idle, TimerStatus.paused):
            return
        self._arm_ahead()
        self._fsm.try_send("run")
        self._changed()

    def pause(self) -> None:
        if self._fsm.try_send("halt"):
            self._changed()

    def reset(self) -> None:
        current = self.current_event
        if current is None:
            return
        if self._fsm.try_send("rewind"):
            self.remaining_seconds = _countdown_for(current)
            self._changed()

    def skip(self) -> None:
        if not self.queue or self.status == TimerStatus.finished:
            return
        if self.current_index < len(self.queue) - 1:
            self._arm_ahead()
        if self._advance_or_finish():
            self._changed()

    def tick(self) -> None:
        if self.status != TimerStatus.running:
            return
        if self.remaining_seconds <= 1:
            self._advance_or_finish()
        else:
            self.remaining_seconds -= 1
        self._changed()

    def _advance_or_finish(self) -> bool:
        if self.current_index < len(self.queue) - 1:
            if not self._fsm.try_send("advance"):
                return False
            self.current_index += 1
            current = self.queue[self.current_index]
            self.remaining_seconds = _countdown_for(current)
            logger.info("Advanced to event %s (%r), %ds", current.id, current.name, self.remaining_seconds)
            return True

        if not self._fsm.try_send("finish"):
            return False
        self.remaining_seconds = 0
        logger.info("Queue finished after %d event(s)", len(self.queue))
        return True

    def _arm_ahead(self) -> None:
        # Arm before the status flips to running: a scheduler that cannot arm
        # (no running loop) raises here and leaves the engine untouched.
        if self.scheduler is not None:
            self.scheduler.arm(self.tick)

    def _changed(self) -> None:
        if self.scheduler is not None:
            if self.status == TimerStatus.running:
                self.scheduler.arm(self.tick)
            else:
                self.scheduler.cancel()

        if self._listeners:
            snap = self.snapshot()
            for listener in list(self._listeners):
                listener(snap)
