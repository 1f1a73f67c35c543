"""Retention limits for the history journal."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import HistoryStore, OperationHistoryEntry, PruneConfig
from .storage import HistoryRepository

DEFAULT_PRUNE_CONFIG = PruneConfig()


def should_prune(
    store: HistoryStore,
    config: PruneConfig = DEFAULT_PRUNE_CONFIG,
    *,
    now: Optional[datetime] = None,
) -> bool:
    """Return whether `prune_history` would remove anything."""
    if config.max_entries and len(store.entries) > config.max_entries:
        return True
    cutoff = _cutoff(config, now)
    return cutoff is not None and any(entry.timestamp < cutoff for entry in store.entries)


def prune_history(
    store: HistoryStore,
    config: PruneConfig = DEFAULT_PRUNE_CONFIG,
    *,
    now: Optional[datetime] = None,
) -> HistoryStore:
    """Return a copy of ``store`` without entries beyond the retention limits.

    The count limit keeps the newest ``max_entries`` entries, then the age limit
    drops entries older than ``max_age_days``. ``last_pruned`` changes only when
    an entry was removed.
    """
    now = now or datetime.now(timezone.utc)
    entries: list[OperationHistoryEntry] = sorted(
        store.entries, key=lambda entry: entry.timestamp, reverse=True
    )
    if config.max_entries:
        entries = entries[: config.max_entries]

    cutoff = _cutoff(config, now)
    if cutoff is not None:
        entries = [entry for entry in entries if entry.timestamp >= cutoff]

    removed = len(entries) < len(store.entries)
    return store.model_copy(
        update={
            "entries": entries,
            "last_pruned": now if removed else store.last_pruned,
        }
    )


def prune_repository(
    repository: HistoryRepository,
    config: PruneConfig = DEFAULT_PRUNE_CONFIG,
) -> int:
    """Prune the stored journal and return how many entries were removed."""
    store = repository.load()
    pruned = prune_history(store, config)
    removed = len(store.entries) - len(pruned.entries)
    if removed:
        repository.save(pruned)
    return removed


def _cutoff(config: PruneConfig, now: Optional[datetime]) -> Optional[datetime]:
    if not config.max_age_days:
        return None
    return (now or datetime.now(timezone.utc)) - timedelta(days=config.max_age_days)


__all__ = ["DEFAULT_PRUNE_CONFIG", "prune_history", "prune_repository", "should_prune"]
