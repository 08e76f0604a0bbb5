from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

StorageKind = Literal["file", "memory"]


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str
    remote_enabled: bool
    # Identity stamped on remote records. Without one, remote writes fall back locally.
    owner_id: str | None
    storage: StorageKind
    storage_dir: Path
    tick_seconds: float
    log_level: str


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().casefold() in {"1", "true", "yes", "on"}


def settings_from_env() -> Settings:
    storage = os.environ.get("VODTIMER_STORAGE", "file").strip().casefold()
    if storage not in {"file", "memory"}:
        raise RuntimeError(f"VODTIMER_STORAGE must be 'file' or 'memory', got {storage!r}")

    return Settings(
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        remote_enabled=_flag("VODTIMER_REMOTE_ENABLED", True),
        owner_id=os.environ.get("VODTIMER_OWNER_ID") or None,
        storage=storage,  # type: ignore[arg-type]
        storage_dir=Path(os.environ.get("VODTIMER_STORAGE_DIR", ".vodtimer")),
        tick_seconds=float(os.environ.get("VODTIMER_TICK_SECONDS", "1.0")),
        log_level=os.environ.get("VODTIMER_LOG_LEVEL", "INFO").upper(),
    )
