from __future__ import annotations

from vodtimer.config import Settings, settings_from_env
from vodtimer.event_store import EventRepository, LocalEventTable, RedisEventTable
from vodtimer.infra.local_storage import FileStorage, MemoryStorage, StoragePort
from vodtimer.infra.redis_client import create_redis
from vodtimer.schedule import ScheduleFacade
from vodtimer.ticker import AsyncioTickScheduler
from vodtimer.timer_engine import TimerEngine


_FACADE: ScheduleFacade | None = None


def build_facade(settings: Settings) -> ScheduleFacade:
    storage: StoragePort = MemoryStorage() if settings.storage == "memory" else FileStorage(settings.storage_dir)
    remote = RedisEventTable(r=create_redis(settings)) if settings.remote_enabled else None
    repository = EventRepository(
        local=LocalEventTable(storage=storage),
        remote=remote,
        owner_id=settings.owner_id,
    )
    engine = TimerEngine(scheduler=AsyncioTickScheduler(interval_s=settings.tick_seconds))
    return ScheduleFacade(repository=repository, engine=engine)


def init_schedule(*, settings: Settings | None = None, facade: ScheduleFacade | None = None) -> ScheduleFacade:
    """Build the process-wide facade once and cache it.

    Safe to call multiple times; subsequent calls return the already built instance.
    """

    global _FACADE
    if _FACADE is None:
        _FACADE = facade if facade is not None else build_facade(settings or settings_from_env())
    return _FACADE


def reset_schedule_for_tests() -> None:
    """Drop the cached facade so tests can install their own."""

    global _FACADE
    _FACADE = None


def get_schedule() -> ScheduleFacade:
    if _FACADE is None:
        raise RuntimeError("Schedule not initialized. Call init_schedule() at startup.")
    return _FACADE
