from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import TypeVar
from uuid import uuid4

import redis
from pydantic import TypeAdapter, ValidationError

from vodtimer.api.models import Event, EventDraft
from vodtimer.clock import add_years, utc_now
from vodtimer.errors import NotFound, RemoteUnavailable, StorageFatal
from vodtimer.infra.local_storage import StoragePort
from vodtimer.today_queue import offset_seconds
from vodtimer.validation import check_offset_order

logger = logging.getLogger(__name__)

EVENTS_HASH_KEY = "vodtimer:events"  # field = event id, value = Event JSON
LOCAL_STORAGE_KEY = "vodtimer-events-data"

_EVENTS = TypeAdapter(list[Event])

T = TypeVar("T")


def expiry_cutoff(now: datetime) -> date:
    """Events dated strictly before this day are expired."""

    return add_years(now.date(), -1)


def _by_date_then_start(e: Event) -> tuple[date, int]:
    return (e.scheduled_date, offset_seconds(e.start_offset))


def _dedupe(events: Iterable[Event]) -> list[Event]:
    seen: set[str] = set()
    out: list[Event] = []
    for e in events:
        if e.id in seen:
            continue
        seen.add(e.id)
        out.append(e)
    return out


class RedisEventTable:
    """Remote tier: every event lives in one Redis hash keyed by id."""

    def __init__(self, *, r: redis.Redis, key: str = EVENTS_HASH_KEY) -> None:
        self.r = r
        self.key = key

    def select(self, date_filter: date | None = None) -> list[Event]:
        raw = self.r.hvals(self.key)
        events = [Event.model_validate_json(v) for v in raw]
        if date_filter is not None:
            events = [e for e in events if e.scheduled_date == date_filter]
        # Hash order is arbitrary; created_at stands in for insertion order on ties.
        events.sort(key=lambda e: (*_by_date_then_start(e), e.created_at, e.id))
        return events

    def insert(self, draft: EventDraft, *, owner_id: str) -> Event:
        event = Event(id=str(uuid4()), created_at=utc_now(), owner_id=owner_id, **draft.model_dump())
        self.r.hset(self.key, event.id, event.model_dump_json())
        return event

    def update(self, event_id: str, draft: EventDraft, *, owner_id: str) -> Event | None:
        raw = self.r.hget(self.key, event_id)
        if not raw:
            return None
        current = Event.model_validate_json(raw)
        updated = current.model_copy(update={**draft.model_dump(), "owner_id": owner_id})
        self.r.hset(self.key, event_id, updated.model_dump_json())
        return updated

    def delete(self, event_id: str) -> None:
        self.r.hdel(self.key, event_id)

    def delete_where_before(self, cutoff: date) -> int:
        expired = [e.id for e in self.select() if e.scheduled_date < cutoff]
        if expired:
            # Single HDEL: readers see the whole sweep or none of it.
            self.r.hdel(self.key, *expired)
        return len(expired)


class LocalEventTable:
    """Fallback tier: the whole collection is one JSON array under a fixed key."""

    def __init__(self, *, storage: StoragePort, key: str = LOCAL_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self._last_token = 0

    def read_all(self) -> list[Event]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            events = _EVENTS.validate_json(raw)
        except ValidationError as e:
            logger.warning("Local event blob %r is unreadable, treating it as empty: %s", self.key, e)
            return []
        return _dedupe(events)

    def write_all(self, events: Iterable[Event]) -> None:
        self.storage.set_item(self.key, _EVENTS.dump_json(_dedupe(events)).decode("utf-8"))

    def _next_id(self, existing: set[str]) -> str:
        token = max(time.time_ns(), self._last_token + 1)
        while str(token) in existing:
            token += 1
        self._last_token = token
        return str(token)

    def select(self, date_filter: date | None = None) -> list[Event]:
        events = self.read_all()
        if date_filter is not None:
            events = [e for e in events if e.scheduled_date == date_filter]
        # Stable sort keeps insertion order on ties.
        return sorted(events, key=_by_date_then_start)

    def insert(self, draft: EventDraft) -> Event:
        events = self.read_all()
        event = Event(
            id=self._next_id({e.id for e in events}),
            created_at=utc_now(),
            **draft.model_dump(),
        )
        events.append(event)
        self.write_all(events)
        return event

    def update(self, event_id: str, draft: EventDraft) -> Event:
        events = self.read_all()
        for idx, e in enumerate(events):
            if e.id == event_id:
                events[idx] = e.model_copy(update=draft.model_dump())
                self.write_all(events)
                return events[idx]
        raise NotFound(event_id)

    def delete(self, event_id: str) -> None:
        events = self.read_all()
        kept = [e for e in events if e.id != event_id]
        if len(kept) != len(events):
            self.write_all(kept)

    def delete_where_before(self, cutoff: date) -> int:
        events = self.read_all()
        kept = [e for e in events if e.scheduled_date >= cutoff]
        removed = len(events) - len(kept)
        if removed:
            self.write_all(kept)
        return removed


class EventRepository:
    """Event persistence with a remote tier and a local fallback tier.

    Every operation is tried against the remote table first (when one is
    configured). Any remote failure is logged and the same operation is re-run
    against the local table; callers never see which tier served them.
    Local failures are fatal and surface as `StorageFatal`. Writes with a
    segment that does not end after it starts raise `ValidationFailed` before
    either tier is touched.
    """

    def __init__(
        self,
        *,
        local: LocalEventTable,
        remote: RedisEventTable | None = None,
        owner_id: str | None = None,
    ) -> None:
        self.local = local
        self.remote = remote
        self.owner_id = owner_id

    def _require_owner(self) -> str:
        if not self.owner_id:
            raise RemoteUnavailable("No authenticated caller identity for remote write")
        return self.owner_id

    def _run(
        self,
        op: str,
        remote_call: Callable[[RedisEventTable], T],
        local_call: Callable[[LocalEventTable], T],
    ) -> T:
        if self.remote is not None:
            try:
                return remote_call(self.remote)
            except Exception as e:
                logger.warning("Remote %s failed, falling back to local storage: %s", op, e)

        try:
            return local_call(self.local)
        except NotFound:
            raise
        except Exception as e:
            logger.error("Local %s failed: %s", op, e)
            raise StorageFatal(f"Both storage tiers failed during {op}: {e}") from e

    def list(self, date_filter: date | None = None) -> list[Event]:
        return self._run(
            "list",
            lambda t: t.select(date_filter),
            lambda t: t.select(date_filter),
        )

    def create(self, draft: EventDraft) -> Event:
        check_offset_order(draft)
        return self._run(
            "create",
            lambda t: t.insert(draft, owner_id=self._require_owner()),
            lambda t: t.insert(draft),
        )

    def update(self, event_id: str, draft: EventDraft) -> Event:
        check_offset_order(draft)

        def _remote(t: RedisEventTable) -> Event:
            updated = t.update(event_id, draft, owner_id=self._require_owner())
            if updated is None:
                raise RemoteUnavailable(f"Remote update affected no rows for {event_id}")
            return updated

        return self._run("update", _remote, lambda t: t.update(event_id, draft))

    def remove(self, event_id: str) -> None:
        self._run("remove", lambda t: t.delete(event_id), lambda t: t.delete(event_id))

    def purge_expired(self, now: datetime | None = None) -> int:
        cutoff = expiry_cutoff(now or utc_now())
        removed = self._run(
            "purge_expired",
            lambda t: t.delete_where_before(cutoff),
            lambda t: t.delete_where_before(cutoff),
        )
        if removed:
            logger.info("Purged %d event(s) dated before %s", removed, cutoff.isoformat())
        return removed
