from __future__ import annotations

from collections.abc import Iterable
from datetime import date, time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vodtimer.api.models import Event


def offset_seconds(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def duration_seconds(event: Event) -> int:
    return offset_seconds(event.end_offset) - offset_seconds(event.start_offset)


def format_hms(seconds: int) -> str:
    seconds = max(0, seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def build_today_queue(events: Iterable[Event], today: date) -> list[Event]:
    """Today's events in airing order.

    Pure: filters to `scheduled_date == today` and stable-sorts by start
    offset, so events sharing a start keep the order they were given in.
    """

    todays = [e for e in events if e.scheduled_date == today]
    return sorted(todays, key=lambda e: offset_seconds(e.start_offset))
