"""Restore individual files to the location they had before any recorded rename."""

from __future__ import annotations

import logging
import os
import time
from typing import Optional

from .lookup import lookup_file_history
from .models import RestoreOptions, RestoreResult, UndoOptions
from .storage import HistoryRepository, resolve_repository
from .undo import undo_operation

LOGGER = logging.getLogger(__name__)


def restore_file(
    path: str | os.PathLike[str] | None,
    options: Optional[RestoreOptions] = None,
    *,
    repository: Optional[HistoryRepository] = None,
) -> RestoreResult:
    """Move one file back to its original path, or undo a whole operation.

    Conditions that prevent a restore are reported on the result, never raised.

    Args:
        path: Any path in the file's rename lineage. May be None when
            ``options.operation_id`` is given.
        options: Dry-run, lookup-only, and operation id options.
        repository: Journal to consult; the default journal when omitted.

    Returns:
        RestoreResult: Outcome of the restore or lookup.

    Raises:
        HistoryStoreError: If the journal cannot be read.
        OperationNotFoundError: If ``options.operation_id`` is unknown.
        OperationAlreadyUndoneError: If that operation was already undone.
    """
    options = options or RestoreOptions()
    repository = resolve_repository(repository)
    clock = time.perf_counter()
    searched = os.fspath(path) if path is not None else ""

    if options.operation_id:
        return _restore_operation(options.operation_id, searched, options.dry_run, repository, clock)

    if not searched:
        return _result(clock, success=False, searched_path="", error="File path is required")

    lookup = lookup_file_history(searched, repository=repository)
    if not lookup.found:
        return _result(
            clock, success=False, searched_path=searched, error=f"No history found for file: {searched}"
        )

    known = {
        "searched_path": searched,
        "original_path": lookup.original_path,
        "previous_path": lookup.current_path,
        "operation_id": lookup.last_operation_id,
    }

    if options.lookup_only:
        return _result(clock, success=True, dry_run=True, message="Lookup completed", **known)

    if lookup.is_at_original:
        return _result(
            clock,
            success=True,
            searched_path=searched,
            original_path=lookup.original_path,
            operation_id=lookup.last_operation_id,
            message="File is already at original location",
        )

    current, original = lookup.current_path, lookup.original_path
    if not current or not os.path.lexists(current):
        return _result(
            clock,
            success=False,
            error="File no longer exists at expected location. It may have been moved or deleted.",
            **known,
        )
    if not original:
        return _result(clock, success=False, error="Original path is unknown", **known)
    if os.path.lexists(original):
        return _result(
            clock, success=False, error="Original path is now occupied by another file", **known
        )
    parent = os.path.dirname(original)
    if parent and not os.path.isdir(parent):
        return _result(
            clock, success=False, error=f"Parent directory does not exist: {parent}", **known
        )

    if options.dry_run:
        return _result(clock, success=True, dry_run=True, **known)

    try:
        os.rename(current, original)
    except OSError as exc:
        return _result(clock, success=False, error=str(exc), **known)

    LOGGER.debug("Restored %s -> %s", current, original)
    return _result(clock, success=True, message=f"Restored to {original}", **known)


def _restore_operation(
    operation_id: str,
    searched: str,
    dry_run: bool,
    repository: HistoryRepository,
    clock: float,
) -> RestoreResult:
    undo = undo_operation(operation_id, UndoOptions(dry_run=dry_run), repository=repository)
    searched_path = searched or f"operation:{operation_id}"
    if not undo.success and undo.files_failed:
        return _result(
            clock,
            success=False,
            dry_run=undo.dry_run,
            searched_path=searched_path,
            operation_id=undo.operation_id,
            error=f"Restore failed: {undo.files_failed} file(s) could not be restored",
        )
    return _result(
        clock,
        success=undo.success,
        dry_run=undo.dry_run,
        searched_path=searched_path,
        operation_id=undo.operation_id,
        message=f"Restored {undo.files_restored} file(s) from operation",
    )


def _result(clock: float, **fields: object) -> RestoreResult:
    return RestoreResult(duration_ms=int((time.perf_counter() - clock) * 1000), **fields)


__all__ = ["restore_file"]
