"""Trace files through the history journal."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import (
    FileHistoryLookup,
    FileHistoryRecord,
    FileOperationEntry,
    HistoryStore,
    OperationHistoryEntry,
)
from .storage import HistoryRepository, resolve_repository


@dataclass(frozen=True, slots=True)
class _Match:
    order: int
    entry: OperationHistoryEntry
    record: FileHistoryRecord


def lookup_file_history(
    path: str | os.PathLike[str],
    *,
    repository: Optional[HistoryRepository] = None,
) -> FileHistoryLookup:
    """Return where a file started and where the journal says it is now.

    ``path`` may be any point of the file's lineage: a rename chain A -> B -> C
    is found from A, B, or C.

    Raises:
        HistoryStoreError: If the journal cannot be read.
    """
    store = resolve_repository(repository).load()
    return _lookup(store, path)


def lookup_multiple_files(
    paths: Iterable[str | os.PathLike[str]],
    *,
    repository: Optional[HistoryRepository] = None,
) -> dict[str, FileHistoryLookup]:
    """Look up several paths against a single load of the journal.

    Returns:
        dict[str, FileHistoryLookup]: Results keyed by the paths as given.
    """
    store = resolve_repository(repository).load()
    return {os.fspath(path): _lookup(store, path) for path in paths}


def has_file_been_renamed(
    path: str | os.PathLike[str],
    *,
    repository: Optional[HistoryRepository] = None,
) -> bool:
    """Return whether the journal knows the file and it is away from its original path."""
    lookup = lookup_file_history(path, repository=repository)
    return lookup.found and not lookup.is_at_original


def get_original_path(
    path: str | os.PathLike[str],
    *,
    repository: Optional[HistoryRepository] = None,
) -> Optional[str]:
    """Return the file's original path when it has been moved away from it."""
    lookup = lookup_file_history(path, repository=repository)
    if lookup.found and not lookup.is_at_original:
        return lookup.original_path
    return None


def _normalize(path: str | os.PathLike[str]) -> str:
    return os.path.abspath(os.fspath(path))


def _lookup(store: HistoryStore, path: str | os.PathLike[str]) -> FileHistoryLookup:
    searched = _normalize(path)
    matches = _collect_lineage(store, searched)
    if not matches:
        return FileHistoryLookup(found=False, searched_path=searched)

    matches.sort(key=lambda match: (match.entry.timestamp, -match.order), reverse=True)
    latest, earliest = matches[0], matches[-1]
    original_path = earliest.record.original_path
    return FileHistoryLookup(
        found=True,
        searched_path=searched,
        original_path=original_path,
        current_path=latest.record.new_path,
        is_at_original=os.path.exists(original_path),
        last_modified=latest.entry.timestamp,
        last_operation_id=latest.entry.id,
        operations=[
            FileOperationEntry(
                operation_id=match.entry.id,
                operation_type=match.entry.operation_type,
                timestamp=match.entry.timestamp,
                original_path=match.record.original_path,
                new_path=match.record.new_path,
            )
            for match in matches
        ],
    )


def _collect_lineage(store: HistoryStore, searched: str) -> list[_Match]:
    """Return every completed record connected to ``searched`` through shared paths."""
    pending: list[tuple[_Match, str, str]] = []
    order = 0
    for entry in store.entries:
        for record in entry.files:
            if not record.success or not record.new_path:
                continue
            match = _Match(order=order, entry=entry, record=record)
            pending.append((match, _normalize(record.original_path), _normalize(record.new_path)))
            order += 1

    lineage = {searched}
    matched: list[_Match] = []
    grew = True
    while grew:
        grew = False
        remaining = []
        for match, original, new in pending:
            if original in lineage or new in lineage:
                lineage.update((original, new))
                matched.append(match)
                grew = True
            else:
                remaining.append((match, original, new))
        pending = remaining
    return matched


__all__ = [
    "get_original_path",
    "has_file_been_renamed",
    "lookup_file_history",
    "lookup_multiple_files",
]
