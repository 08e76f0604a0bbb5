from __future__ import annotations

import asyncio
from collections.abc import Callable


class AsyncioTickScheduler:
    """Fires a callback on the running event loop at a fixed cadence.

    Deadlines are computed from the arm time (not from each callback's end),
    so a slow tick does not drift the cadence. Because callbacks run on the
    loop, they are serialized with every other call made from that loop.
    """

    def __init__(self, *, interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.interval_s = interval_s
        self._handle: asyncio.TimerHandle | None = None
        self._callback: Callable[[], None] | None = None
        self._deadline = 0.0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, callback: Callable[[], None]) -> None:
        if self._handle is not None:
            return
        loop = asyncio.get_running_loop()
        self._callback = callback
        self._deadline = loop.time() + self.interval_s
        self._handle = loop.call_at(self._deadline, self._fire, loop)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None

    def _fire(self, loop: asyncio.AbstractEventLoop) -> None:
        callback = self._callback
        if callback is None:
            return
        # Schedule the next tick first; the callback may cancel it.
        self._deadline += self.interval_s
        self._handle = loop.call_at(self._deadline, self._fire, loop)
        callback()


class ManualTickScheduler:
    """Scheduler driven by hand: `fire()` stands in for one elapsed interval."""

    def __init__(self) -> None:
        self._callback: Callable[[], None] | None = None
        self.arm_count = 0
        self.cancel_count = 0

    @property
    def armed(self) -> bool:
        return self._callback is not None

    def arm(self, callback: Callable[[], None]) -> None:
        if self._callback is not None:
            return
        self._callback = callback
        self.arm_count += 1

    def cancel(self) -> None:
        if self._callback is not None:
            self.cancel_count += 1
        self._callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self._callback is None:
                return
            self._callback()
