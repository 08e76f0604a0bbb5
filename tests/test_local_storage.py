from __future__ import annotations

from pathlib import Path

from factories import make_draft
from vodtimer.event_store import LOCAL_STORAGE_KEY, EventRepository, LocalEventTable
from vodtimer.infra.local_storage import FileStorage, MemoryStorage


def test_memory_storage_get_set() -> None:
    s = MemoryStorage()
    assert s.get_item("k") is None
    s.set_item("k", "v1")
    s.set_item("k", "v2")
    assert s.get_item("k") == "v2"


def test_file_storage_missing_key_is_none(tmp_path: Path) -> None:
    assert FileStorage(tmp_path / "store").get_item("k") is None


def test_file_storage_overwrites_whole_value(tmp_path: Path) -> None:
    s = FileStorage(tmp_path / "store")
    s.set_item("k", "a long first value")
    s.set_item("k", "short")

    assert s.get_item("k") == "short"
    # No temp files left behind.
    assert sorted(p.name for p in (tmp_path / "store").iterdir()) == ["k.json"]


def test_file_backed_events_survive_a_new_repository(tmp_path: Path) -> None:
    root = tmp_path / "store"
    first = EventRepository(local=LocalEventTable(storage=FileStorage(root)))
    created = first.create(make_draft("persisted"))

    second = EventRepository(local=LocalEventTable(storage=FileStorage(root)))

    assert [e.id for e in second.list()] == [created.id]
    assert (root / f"{LOCAL_STORAGE_KEY}.json").exists()
