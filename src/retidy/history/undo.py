"""Reverse recorded batch operations."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, cast

from .errors import (
    EmptyHistoryError,
    HistoryError,
    OperationAlreadyUndoneError,
    OperationNotFoundError,
)
from .models import (
    FileHistoryRecord,
    HistoryStore,
    OperationHistoryEntry,
    UndoFileResult,
    UndoOptions,
    UndoResult,
)
from .storage import HistoryRepository, resolve_repository

LOGGER = logging.getLogger(__name__)

ORIGINAL_FAILED = "Original operation failed for this file"
NO_DESTINATION = "No destination path recorded"
FILE_MISSING = "File no longer exists at expected location"
ORIGINAL_OCCUPIED = "Original path is now occupied by another file"


def undo_operation(
    operation_id: Optional[str] = None,
    options: Optional[UndoOptions] = None,
    *,
    repository: Optional[HistoryRepository] = None,
) -> UndoResult:
    """Move the files of a recorded operation back to their original paths.

    Every file is checked before anything moves. When a file cannot be restored
    and neither ``force`` nor ``dry_run`` is set, nothing is touched and a
    preview result with ``dry_run=True`` is returned instead.

    Args:
        operation_id: Entry to undo; the most recent active entry when omitted.
        options: Dry-run and force flags.
        repository: Journal to read and update; the default journal when omitted.

    Returns:
        UndoResult: Per-file outcomes. ``success`` is False when a file failed or
        a renamed file could not be found.

    Raises:
        EmptyHistoryError: If no entry can be undone.
        OperationNotFoundError: If ``operation_id`` is unknown.
        OperationAlreadyUndoneError: If the entry was already undone.
        HistoryStoreError: If the journal cannot be read.
    """
    options = options or UndoOptions()
    repository = resolve_repository(repository)
    clock = time.perf_counter()

    entry = _select_entry(repository.load(), operation_id)
    if entry.is_undone:
        raise OperationAlreadyUndoneError("Operation already undone")

    preview = [_precheck(record) for record in entry.files]
    blocked = any(result is not None and result.error for result in preview)
    if options.dry_run or (blocked and not options.force):
        if not options.dry_run:
            LOGGER.info("Undo of %s blocked by conflicting files; nothing was moved", entry.id)
        files = [
            result if result is not None else _restored(record)
            for record, result in zip(entry.files, preview)
        ]
        return _build_result(
            entry,
            files,
            dry_run=True,
            removed=[],
            clock=clock,
            count_restored=options.dry_run,
        )

    files = [_reverse(record) for record in entry.files]
    removed = cleanup_directories(entry.directories_created)

    try:
        mark_operation_as_undone(entry.id, repository)
    except HistoryError as exc:
        LOGGER.warning("Failed to mark operation %s as undone: %s", entry.id, exc)

    return _build_result(entry, files, dry_run=False, removed=removed, clock=clock)


def cleanup_directories(directories: Iterable[str]) -> list[str]:
    """Remove the given directories that are empty, deepest first.

    Returns:
        list[str]: Directories that were removed.
    """
    removed: list[str] = []
    for directory in sorted(directories, key=len, reverse=True):
        path = Path(directory)
        try:
            if not path.is_dir() or any(path.iterdir()):
                continue
            path.rmdir()
        except OSError as exc:
            LOGGER.debug("Keeping directory %s: %s", directory, exc)
            continue
        removed.append(directory)
    return removed


def mark_operation_as_undone(
    operation_id: str, repository: Optional[HistoryRepository] = None
) -> OperationHistoryEntry:
    """Stamp ``undone_at`` on an entry and save the journal.

    Raises:
        OperationNotFoundError: If no entry has ``operation_id``.
        HistoryStoreError: If the journal cannot be read or written.
    """
    repository = resolve_repository(repository)
    store = repository.load()
    entry = _find_entry(store, operation_id)
    entry.undone_at = datetime.now(timezone.utc)
    repository.save(store)
    return entry


def is_operation_undone(
    operation_id: str, repository: Optional[HistoryRepository] = None
) -> bool:
    """Return whether the entry has been undone.

    Raises:
        OperationNotFoundError: If no entry has ``operation_id``.
    """
    store = resolve_repository(repository).load()
    return _find_entry(store, operation_id).is_undone


def _select_entry(store: HistoryStore, operation_id: Optional[str]) -> OperationHistoryEntry:
    if operation_id:
        return _find_entry(store, operation_id)
    for entry in store.entries:
        if not entry.is_undone:
            return entry
    raise EmptyHistoryError("No operations in history to undo")


def _find_entry(store: HistoryStore, operation_id: str) -> OperationHistoryEntry:
    for entry in store.entries:
        if entry.id == operation_id:
            return entry
    raise OperationNotFoundError(f"Operation not found: {operation_id}")


def _precheck(record: FileHistoryRecord) -> Optional[UndoFileResult]:
    """Return the outcome for a record that cannot be restored, else None."""
    if not record.success:
        return _skipped(record, ORIGINAL_FAILED)
    if not record.new_path:
        return _skipped(record, NO_DESTINATION)
    if not os.path.lexists(record.new_path):
        return _skipped(record, FILE_MISSING)
    if os.path.lexists(record.original_path):
        return _failed(record, ORIGINAL_OCCUPIED)
    parent = os.path.dirname(record.original_path)
    if parent and not os.path.isdir(parent):
        return _failed(record, f"Parent directory does not exist: {parent}")
    return None


def _reverse(record: FileHistoryRecord) -> UndoFileResult:
    problem = _precheck(record)
    if problem is not None:
        return problem
    # _precheck skips records without a destination.
    new_path = cast(str, record.new_path)
    try:
        os.rename(new_path, record.original_path)
    except OSError as exc:
        return _failed(record, str(exc))
    LOGGER.debug("Restored %s -> %s", new_path, record.original_path)
    return _restored(record)


def _restored(record: FileHistoryRecord) -> UndoFileResult:
    return UndoFileResult(
        original_path=record.original_path,
        current_path=record.new_path,
        success=True,
    )


def _skipped(record: FileHistoryRecord, reason: str) -> UndoFileResult:
    return UndoFileResult(
        original_path=record.original_path,
        current_path=record.new_path,
        success=False,
        skip_reason=reason,
    )


def _failed(record: FileHistoryRecord, error: str) -> UndoFileResult:
    return UndoFileResult(
        original_path=record.original_path,
        current_path=record.new_path,
        success=False,
        error=error,
    )


def _build_result(
    entry: OperationHistoryEntry,
    files: list[UndoFileResult],
    *,
    dry_run: bool,
    removed: list[str],
    clock: float,
    count_restored: bool = True,
) -> UndoResult:
    restored = sum(1 for result in files if result.success)
    skipped = sum(1 for result in files if result.skip_reason)
    failed = sum(1 for result in files if result.error)
    missing = sum(1 for result in files if result.skip_reason == FILE_MISSING)
    return UndoResult(
        operation_id=entry.id,
        success=failed == 0 and missing == 0 and count_restored,
        dry_run=dry_run,
        files_restored=restored if count_restored else 0,
        files_skipped=skipped,
        files_failed=failed,
        directories_removed=removed,
        files=files,
        duration_ms=int((time.perf_counter() - clock) * 1000),
    )


__all__ = [
    "FILE_MISSING",
    "ORIGINAL_FAILED",
    "ORIGINAL_OCCUPIED",
    "NO_DESTINATION",
    "cleanup_directories",
    "is_operation_undone",
    "mark_operation_as_undone",
    "undo_operation",
]
