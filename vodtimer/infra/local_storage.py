from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StoragePort(Protocol):
    """Flat string key-value storage used by the local fallback tier.

    Contract:
      - `get_item` returns None for a missing or undecodable key.
      - `set_item` fully overwrites the value under `key`.
      - Either may raise if the underlying storage is unavailable.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class FileStorage:
    """One UTF-8 file per key under `root`.

    Writes go through a temp file + rename so a concurrent reader sees either
    the old or the new blob, never a partial one.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Stored value %s is not valid UTF-8, treating it as missing: %s", path, e)
            return None

    def set_item(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, self._path_for(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
