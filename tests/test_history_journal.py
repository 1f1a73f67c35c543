"""Tests for recording, pruning, and querying the history journal."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

from retidy.history import (
    HistoryRepository,
    HistoryStore,
    OperationHistoryEntry,
    PruneConfig,
    create_entry_from_result,
    determine_operation_type,
    get_history,
    get_history_count,
    get_history_entry,
    prune_history,
    prune_repository,
    record_operation,
    should_prune,
)
from retidy.rename.models import BatchRenameResult, BatchRenameSummary, FileRenameResult

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _batch(*, move: bool = False) -> BatchRenameResult:
    results = [
        FileRenameResult(
            proposal_id="1",
            original_path="/in/a.txt",
            original_name="a.txt",
            new_path="/out/a.txt" if move else "/in/b.txt",
            new_name="a.txt" if move else "b.txt",
            outcome="success",
            is_move_operation=move,
        ),
        FileRenameResult(
            proposal_id="2",
            original_path="/in/c.txt",
            original_name="c.txt",
            outcome="failed",
            error="Permission denied",
        ),
    ]
    return BatchRenameResult(
        success=False,
        results=results,
        summary=BatchRenameSummary(total=2, succeeded=1, failed=1, directories_created=1),
        started_at=NOW,
        completed_at=NOW,
        duration_ms=42,
        directories_created=["/out"] if move else [],
    )


def _entry(age_days: float, operation_type: str = "rename") -> OperationHistoryEntry:
    return OperationHistoryEntry(
        id=str(uuid.uuid4()),
        timestamp=NOW - timedelta(days=age_days),
        operation_type=operation_type,
        file_count=0,
    )


def test_operation_type_is_move_when_any_file_moved() -> None:
    assert determine_operation_type(_batch().results) == "rename"
    assert determine_operation_type(_batch(move=True).results) == "move"


def test_create_entry_copies_batch_outcomes() -> None:
    entry = create_entry_from_result(_batch(move=True))

    assert uuid.UUID(entry.id).version == 4
    assert entry.timestamp.tzinfo is not None
    assert entry.operation_type == "move"
    assert entry.file_count == 2
    assert entry.duration_ms == 42
    assert entry.summary.succeeded == 1
    assert entry.summary.failed == 1
    assert entry.summary.directories_created == 1
    assert entry.directories_created == ["/out"]
    assert [(f.success, f.new_path, f.error) for f in entry.files] == [
        (True, "/out/a.txt", None),
        (False, None, "Permission denied"),
    ]
    assert entry.files[0].is_move_operation is True
    assert entry.undone_at is None


def test_record_operation_prepends_newest_first(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")

    first = record_operation(_batch(), repository=repository)
    second = record_operation(_batch(move=True), repository=repository)

    assert [entry.id for entry in repository.load().entries] == [second.id, first.id]


def test_record_operation_extends_a_provided_store(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")
    existing = HistoryStore(entries=[_entry(1)])

    entry = record_operation(_batch(), repository=repository, store=existing)

    stored = repository.load().entries
    assert [item.id for item in stored] == [entry.id, existing.entries[1].id]


def test_record_operation_auto_prunes_when_configured(tmp_path: Path) -> None:
    repository = HistoryRepository(
        tmp_path / "history.json", prune_config=PruneConfig(max_entries=2, max_age_days=0)
    )

    ids = [record_operation(_batch(), repository=repository).id for _ in range(3)]

    store = repository.load()
    assert [entry.id for entry in store.entries] == [ids[2], ids[1]]
    assert store.last_pruned is not None


def test_prune_applies_count_then_age_limits() -> None:
    store = HistoryStore(entries=[_entry(age) for age in (0, 1, 2, 40, 50)])

    by_count = prune_history(store, PruneConfig(max_entries=3, max_age_days=0), now=NOW)
    by_age = prune_history(store, PruneConfig(max_entries=0, max_age_days=30), now=NOW)
    both = prune_history(store, PruneConfig(max_entries=2, max_age_days=30), now=NOW)

    assert by_count.entries == store.entries[:3]
    assert by_age.entries == store.entries[:3]
    assert both.entries == store.entries[:2]
    assert both.last_pruned == NOW
    assert len(store.entries) == 5


def test_prune_without_removal_keeps_last_pruned() -> None:
    earlier = NOW - timedelta(days=3)
    store = HistoryStore(last_pruned=earlier, entries=[_entry(1)])

    pruned = prune_history(store, PruneConfig(), now=NOW)

    assert pruned.last_pruned == earlier
    assert should_prune(store, PruneConfig(), now=NOW) is False
    assert should_prune(store, PruneConfig(max_entries=0, max_age_days=0), now=NOW) is False


def test_should_prune_detects_old_or_excess_entries() -> None:
    old = HistoryStore(entries=[_entry(31)])
    many = HistoryStore(entries=[_entry(0) for _ in range(3)])

    assert should_prune(old, PruneConfig(max_age_days=30), now=NOW) is True
    assert should_prune(many, PruneConfig(max_entries=2), now=NOW) is True


def test_prune_repository_reports_removed_count(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")
    recent = NOW.replace(year=datetime.now(timezone.utc).year + 1)
    fresh = _entry(0).model_copy(update={"timestamp": recent})
    stale = _entry(0).model_copy(update={"timestamp": datetime(2000, 1, 1, tzinfo=timezone.utc)})
    repository.save(HistoryStore(entries=[fresh, stale]))

    removed = prune_repository(repository, PruneConfig(max_entries=10, max_age_days=30))

    assert removed == 1
    assert [entry.id for entry in repository.load().entries] == [fresh.id]
    assert prune_repository(repository, PruneConfig(max_entries=10, max_age_days=30)) == 0


def test_queries_filter_limit_and_count(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")
    entries = [_entry(0, "move"), _entry(1, "rename"), _entry(2, "move")]
    repository.save(HistoryStore(entries=entries))

    assert [e.id for e in get_history(repository)] == [e.id for e in entries]
    assert [e.id for e in get_history(repository, limit=1)] == [entries[0].id]
    assert [e.id for e in get_history(repository, limit=0)] == [e.id for e in entries]
    assert [e.id for e in get_history(repository, operation_type="move")] == [
        entries[0].id,
        entries[2].id,
    ]
    assert get_history_count(repository) == 3
    assert get_history_count(repository, operation_type="rename") == 1
    assert get_history_entry(repository, entries[1].id) == entries[1]
    assert get_history_entry(repository, "missing") is None
