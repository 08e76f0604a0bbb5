from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from vodtimer.api.models import Event, EventDraft, TimerSnapshot
from vodtimer.clock import utc_now, utc_today
from vodtimer.event_store import EventRepository
from vodtimer.timer_engine import TimerEngine
from vodtimer.today_queue import build_today_queue
from vodtimer.validation import validate_draft

logger = logging.getLogger(__name__)


class ScheduleFacade:
    """Single entry point for the presentation layer.

    Every successful mutation is followed by a full re-read of the active
    store, a rebuild of today's queue and `engine.load_queue`, so the timer
    always reflects the last committed event set. A failed write leaves the
    engine untouched and the error propagates.
    """

    def __init__(
        self,
        *,
        repository: EventRepository,
        engine: TimerEngine,
        today: Callable[[], date] = utc_today,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repository = repository
        self.engine = engine
        self._today = today
        self._now = now

    def today(self) -> date:
        return self._today()

    def refresh(self) -> TimerSnapshot:
        events = self.repository.list()
        queue = build_today_queue(events, self.today())
        self.engine.load_queue(queue)
        logger.debug("Loaded %d event(s) into today's queue", len(queue))
        return self.engine.snapshot()

    # --- events ---

    def list_events(self, date_filter: date | None = None) -> list[Event]:
        return self.repository.list(date_filter)

    def create_event(self, draft: EventDraft) -> Event:
        validate_draft(draft, today=self.today())
        event = self.repository.create(draft)
        self.refresh()
        return event

    def update_event(self, event_id: str, draft: EventDraft) -> Event:
        validate_draft(draft, today=self.today())
        event = self.repository.update(event_id, draft)
        self.refresh()
        return event

    def remove_event(self, event_id: str) -> None:
        self.repository.remove(event_id)
        self.refresh()

    def purge_expired(self) -> int:
        removed = self.repository.purge_expired(self._now())
        self.refresh()
        return removed

    # --- timer ---

    def snapshot(self) -> TimerSnapshot:
        return self.engine.snapshot()

    def start(self) -> TimerSnapshot:
        self.engine.start()
        return self.engine.snapshot()

    def pause(self) -> TimerSnapshot:
        self.engine.pause()
        return self.engine.snapshot()

    def reset(self) -> TimerSnapshot:
        self.engine.reset()
        return self.engine.snapshot()

    def skip(self) -> TimerSnapshot:
        self.engine.skip()
        return self.engine.snapshot()
