from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from vodtimer.api.models import TimerSnapshot
from vodtimer.schedule import ScheduleFacade
from vodtimer.websocket_hub import TimerWebSocketHub


class _RecordingSocket:
    """Stands in for a WebSocket; larger countdowns take longer to send."""

    def __init__(self) -> None:
        self.sent: list[int] = []

    async def accept(self) -> None:
        return None

    async def send_json(self, payload: dict) -> None:  # type: ignore[type-arg]
        remaining = payload["snapshot"]["remaining_seconds"]
        await asyncio.sleep(remaining * 0.005)
        self.sent.append(remaining)


def test_ws_timer_updates_broadcast(client_and_facade: tuple[TestClient, ScheduleFacade]) -> None:
    client, _ = client_and_facade
    client.post(
        "/events",
        json={"name": "live", "scheduled_date": "2025-06-15", "start_offset": "00:00:00", "end_offset": "00:01:00"},
    )

    with client.websocket_connect("/ws/timer") as ws:
        res = client.post("/timer/start")
        assert res.status_code == 200

        msg = ws.receive_json()
        assert msg["type"] == "timer_updated"
        assert msg["snapshot"]["status"] == "running"
        assert msg["snapshot"]["current_event"]["name"] == "live"


@pytest.mark.asyncio
async def test_snapshots_reach_each_socket_in_publish_order() -> None:
    hub = TimerWebSocketHub()
    sockets = [_RecordingSocket(), _RecordingSocket()]
    for s in sockets:
        await hub.connect(s)  # type: ignore[arg-type]

    for remaining in (3, 2, 1):
        hub.publish_snapshot(TimerSnapshot(remaining_seconds=remaining))

    for _ in range(100):
        if all(len(s.sent) == 3 for s in sockets):
            break
        await asyncio.sleep(0.01)

    assert [s.sent for s in sockets] == [[3, 2, 1], [3, 2, 1]]
