from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient

from factories import NOW, TODAY
from vodtimer.event_store import EventRepository, LocalEventTable, RedisEventTable
from vodtimer.infra.local_storage import MemoryStorage
from vodtimer.schedule import ScheduleFacade
from vodtimer.ticker import ManualTickScheduler
from vodtimer.timer_engine import TimerEngine


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs, then force hermetic storage settings.

    The app must never reach a real Redis or write to the working directory
    from tests, whatever the local .env says.
    """

    if not os.environ.get("CI"):
        env_path = Path(__file__).resolve().parents[1] / ".env"
        if env_path.exists():
            from dotenv import load_dotenv

            load_dotenv(dotenv_path=env_path, override=False)

    os.environ["VODTIMER_REMOTE_ENABLED"] = "0"
    os.environ["VODTIMER_STORAGE"] = "memory"


@pytest.fixture()
def fake_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture()
def fake_redis(fake_server: fakeredis.FakeServer) -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def repository(fake_redis: fakeredis.FakeRedis, storage: MemoryStorage) -> EventRepository:
    return EventRepository(
        local=LocalEventTable(storage=storage),
        remote=RedisEventTable(r=fake_redis),
        owner_id="user-1",
    )


@pytest.fixture()
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture()
def facade(repository: EventRepository, scheduler: ManualTickScheduler) -> ScheduleFacade:
    return ScheduleFacade(
        repository=repository,
        engine=TimerEngine(scheduler=scheduler),
        today=lambda: TODAY,
        now=lambda: NOW,
    )


@pytest.fixture()
def client_and_facade(facade: ScheduleFacade) -> Generator[tuple[TestClient, ScheduleFacade], None, None]:
    """FastAPI TestClient wired to a fakeredis-backed facade with a manual ticker."""

    from vodtimer.main import app
    from vodtimer.schedule_singleton import init_schedule, reset_schedule_for_tests

    reset_schedule_for_tests()
    init_schedule(facade=facade)
    with TestClient(app) as c:
        yield c, facade
    reset_schedule_for_tests()
