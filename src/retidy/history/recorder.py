"""Turn executed batches into journal entries."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from retidy.rename.models import BatchRenameResult, FileRenameResult

from .models import (
    FileHistoryRecord,
    HistoryStore,
    OperationHistoryEntry,
    OperationSummary,
    OperationType,
)
from .pruner import prune_history
from .storage import HistoryRepository, resolve_repository


def determine_operation_type(results: Iterable[FileRenameResult]) -> OperationType:
    """Return ``move`` if any file changed directory, otherwise ``rename``."""
    return "move" if any(result.is_move_operation for result in results) else "rename"


def create_entry_from_result(result: BatchRenameResult) -> OperationHistoryEntry:
    """Build a journal entry describing ``result``."""
    files = [
        FileHistoryRecord(
            original_path=item.original_path,
            new_path=item.new_path,
            is_move_operation=item.is_move_operation,
            success=item.outcome == "success",
            error=item.error,
        )
        for item in result.results
    ]
    return OperationHistoryEntry(
        id=str(uuid.uuid4()),
        timestamp=datetime.now(timezone.utc),
        operation_type=determine_operation_type(result.results),
        file_count=len(result.results),
        summary=OperationSummary(
            succeeded=result.summary.succeeded,
            skipped=result.summary.skipped,
            failed=result.summary.failed,
            directories_created=result.summary.directories_created,
        ),
        duration_ms=result.duration_ms,
        files=files,
        directories_created=list(result.directories_created),
    )


def record_operation(
    result: BatchRenameResult,
    *,
    repository: Optional[HistoryRepository] = None,
    store: Optional[HistoryStore] = None,
) -> OperationHistoryEntry:
    """Prepend an entry for ``result`` to the journal and save it.

    Args:
        result: Executed batch.
        repository: Journal to write; the default journal when omitted.
        store: Already loaded journal contents to extend instead of reloading.

    Returns:
        OperationHistoryEntry: The recorded entry.

    Raises:
        HistoryStoreError: If the journal cannot be read or written.
    """
    repository = resolve_repository(repository)
    if store is None:
        store = repository.load()

    entry = create_entry_from_result(result)
    store.entries.insert(0, entry)
    if repository.prune_config is not None:
        store = prune_history(store, repository.prune_config)
    repository.save(store)
    return entry


__all__ = ["create_entry_from_result", "determine_operation_type", "record_operation"]
