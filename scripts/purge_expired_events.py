"""Delete events dated more than one year ago.

Contract
- Inputs: the same environment the API reads (`REDIS_URL`, `VODTIMER_*`).
- Effect: one expiry sweep against the active storage tier (remote when
  reachable, local otherwise).
- Output: the number of removed events on stdout.

Usage:
    uv run python scripts/purge_expired_events.py

The API also sweeps on startup; this script is for long-running deployments (cron).
"""

from __future__ import annotations

import logging
import sys

from vodtimer.config import settings_from_env
from vodtimer.errors import StorageFatal
from vodtimer.schedule_singleton import build_facade


def main() -> int:
    settings = settings_from_env()
    logging.basicConfig(level=settings.log_level)

    facade = build_facade(settings)
    try:
        removed = facade.repository.purge_expired()
    except StorageFatal as e:
        logging.getLogger(__name__).error("Purge failed: %s", e)
        return 1

    sys.stdout.write(f"{removed}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
