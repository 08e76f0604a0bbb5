from __future__ import annotations

import asyncio
from collections import deque

from fastapi import WebSocket

from vodtimer.api.models import TimerSnapshot


class TimerWebSocketHub:
    """In-process WebSocket fan-out of timer snapshots.

    Contract:
      - register a connection with `connect(websocket)`.
      - broadcast JSON-serializable dicts with `broadcast(payload)`.
      - `publish_snapshot` is a plain callable suitable as a `TimerEngine`
        listener; it queues the snapshot and a single drain task on the running
        loop sends queued snapshots one at a time, in publish order.

    Note: if we later run multiple API replicas, this should move to Redis pub/sub.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self._outbox: deque[dict[str, object]] = deque()
        self._drainer: asyncio.Task[None] | None = None

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._conns)

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            async with self._lock:
                for ws in dead:
                    self._conns.discard(ws)

    async def _drain(self) -> None:
        while self._outbox:
            await self.broadcast(self._outbox.popleft())

    def publish_snapshot(self, snapshot: TimerSnapshot) -> None:
        if not self._conns:
            return
        loop = asyncio.get_running_loop()
        self._outbox.append({"type": "timer_updated", "snapshot": snapshot.model_dump(mode="json")})
        drainer = self._drainer
        if drainer is None or drainer.done() or drainer.get_loop() is not loop:
            self._drainer = loop.create_task(self._drain())


hub = TimerWebSocketHub()
