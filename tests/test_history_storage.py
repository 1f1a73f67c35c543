"""History repository tests."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from retidy.history import (
    HISTORY_STORE_VERSION,
    FileHistoryRecord,
    HistoryRepository,
    HistoryStore,
    HistoryStoreError,
    OperationHistoryEntry,
)


def _entry(entry_id: str = "e1") -> OperationHistoryEntry:
    """Return a one-file journal entry.

    Args:
        entry_id: Identifier for the entry.

    Returns:
        OperationHistoryEntry: Entry describing a single successful rename.
    """
    return OperationHistoryEntry(
        id=entry_id,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        operation_type="rename",
        file_count=1,
        files=[FileHistoryRecord(original_path="/a.txt", new_path="/b.txt", success=True)],
    )


def test_missing_file_loads_empty_store(tmp_path: Path) -> None:
    store = HistoryRepository(tmp_path / "history.json").load()

    assert store.version == HISTORY_STORE_VERSION
    assert store.entries == []
    assert store.last_pruned is None


def test_default_path_lives_under_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert HistoryRepository().path == tmp_path / ".retidy" / "history.json"


def test_save_and_load_round_trip_uses_camel_case(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "nested" / "history.json")

    repository.save(HistoryStore(entries=[_entry()]))

    raw = repository.path.read_text(encoding="utf-8")
    assert '\n  "entries": [' in raw
    payload = json.loads(raw)
    assert payload["version"] == 1
    assert payload["lastPruned"] is None
    entry = payload["entries"][0]
    assert entry["operationType"] == "rename"
    assert entry["undoneAt"] is None
    assert entry["files"][0]["originalPath"] == "/a.txt"

    loaded = repository.load()
    assert loaded.entries[0] == _entry()
    assert list(repository.path.parent.glob("*.tmp")) == []


def test_corrupt_json_is_backed_up(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "history.json"
    path.write_text("{ this is not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="retidy.history.storage"):
        store = HistoryRepository(path).load()

    assert store.entries == []
    assert not path.exists()
    backups = list(tmp_path.glob("history.json.backup.*"))
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == "{ this is not json"
    assert "corrupt" in caplog.text


def test_schema_mismatch_is_backed_up(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.write_text(json.dumps({"version": 1, "entries": [{"id": 3}]}), encoding="utf-8")

    store = HistoryRepository(path).load()

    assert store.entries == []
    assert len(list(tmp_path.glob("history.json.backup.*"))) == 1


def test_unreadable_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.mkdir()

    with pytest.raises(HistoryStoreError):
        HistoryRepository(path).load()


def test_write_failure_raises_and_cleans_up(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.mkdir()
    (path / "keep").write_text("x", encoding="utf-8")

    with pytest.raises(HistoryStoreError):
        HistoryRepository(path).save(HistoryStore())

    assert list(tmp_path.glob("*.tmp")) == []


def test_update_saves_mutated_store(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")

    repository.update(lambda store: store.entries.append(_entry("first")))
    repository.update(lambda store: HistoryStore(entries=[_entry("replaced")]))

    assert [entry.id for entry in repository.load().entries] == ["replaced"]
