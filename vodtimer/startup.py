from __future__ import annotations

import logging

from vodtimer.schedule import ScheduleFacade
from vodtimer.schedule_singleton import init_schedule
from vodtimer.websocket_hub import hub

logger = logging.getLogger(__name__)


def init_schedule_for_app() -> ScheduleFacade:
    """Build the facade, sweep expired events and load today's queue."""

    facade = init_schedule()
    facade.engine.add_listener(hub.publish_snapshot)
    removed = facade.purge_expired()
    logger.info("Startup: purged %d expired event(s), %d event(s) queued for today", removed, len(facade.engine.queue))
    return facade


def shutdown_schedule_for_app(facade: ScheduleFacade) -> None:
    facade.engine.remove_listener(hub.publish_snapshot)
    if facade.engine.scheduler is not None:
        facade.engine.scheduler.cancel()
