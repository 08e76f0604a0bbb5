from __future__ import annotations

import redis

from vodtimer.config import Settings


def create_redis(settings: Settings) -> redis.Redis:
    # decode_responses=True => strings in/out instead of bytes.
    # Short timeouts so an unreachable store degrades to local storage quickly.
    return redis.Redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
