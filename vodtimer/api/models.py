from __future__ import annotations

from datetime import date, datetime, time
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from vodtimer.today_queue import offset_seconds


class EventDraft(BaseModel):
    """The business fields of an event, as submitted by a caller."""

    name: str = Field(..., min_length=1, max_length=200)
    scheduled_date: date

    # VOD segment bounds (time of day, whole seconds).
    start_offset: time
    end_offset: time

    @field_validator("start_offset", "end_offset")
    @classmethod
    def _drop_sub_seconds(cls, v: time) -> time:
        return v.replace(microsecond=0, tzinfo=None)


class Event(EventDraft):
    id: str
    created_at: datetime

    # Set on the remote path only; locally created records have no owner.
    owner_id: str | None = None

    @property
    def duration_seconds(self) -> int:
        return offset_seconds(self.end_offset) - offset_seconds(self.start_offset)

    def business_fields(self) -> EventDraft:
        return EventDraft(
            name=self.name,
            scheduled_date=self.scheduled_date,
            start_offset=self.start_offset,
            end_offset=self.end_offset,
        )


class EventListResponse(BaseModel):
    events: list[Event]


class PurgeResponse(BaseModel):
    removed: int


class TimerStatus(StrEnum):
    idle = "idle"
    running = "running"
    paused = "paused"
    finished = "finished"


class TimerSnapshot(BaseModel):
    queue: list[Event] = Field(default_factory=list)
    current_index: int = 0
    remaining_seconds: int = 0
    status: TimerStatus = TimerStatus.idle

    # Derived, for display.
    current_event: Event | None = None
    display_time: str = "00:00:00"
