from __future__ import annotations

from vodtimer.schedule import ScheduleFacade
from vodtimer.schedule_singleton import get_schedule


def get_facade() -> ScheduleFacade:
    return get_schedule()
