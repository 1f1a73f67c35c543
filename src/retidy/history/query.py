"""Read-only queries over the history journal."""

from __future__ import annotations

from typing import Optional

from .models import OperationHistoryEntry, OperationType
from .storage import HistoryRepository, resolve_repository


def get_history(
    repository: Optional[HistoryRepository] = None,
    *,
    limit: Optional[int] = None,
    operation_type: Optional[OperationType] = None,
) -> list[OperationHistoryEntry]:
    """Return journal entries, newest first.

    Args:
        repository: Journal to read; the default journal when omitted.
        limit: Maximum number of entries; ignored unless positive.
        operation_type: Only return entries of this type.
    """
    entries = resolve_repository(repository).load().entries
    if operation_type is not None:
        entries = [entry for entry in entries if entry.operation_type == operation_type]
    if limit is not None and limit > 0:
        entries = entries[:limit]
    return entries


def get_history_entry(
    repository: Optional[HistoryRepository], operation_id: str
) -> Optional[OperationHistoryEntry]:
    """Return the entry with ``operation_id`` or None."""
    for entry in resolve_repository(repository).load().entries:
        if entry.id == operation_id:
            return entry
    return None


def get_history_count(
    repository: Optional[HistoryRepository] = None,
    *,
    operation_type: Optional[OperationType] = None,
) -> int:
    """Return the number of entries, optionally of one type."""
    return len(get_history(repository, operation_type=operation_type))


__all__ = ["get_history", "get_history_count", "get_history_entry"]
