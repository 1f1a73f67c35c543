"""Persistence for the history journal."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from retidy.config.resolver import DEFAULT_HISTORY_PATH

from .errors import HistoryStoreError
from .models import HistoryStore, PruneConfig

LOGGER = logging.getLogger(__name__)


class HistoryRepository:
    """Load and save the history journal as one JSON document.

    The journal is read and written whole. Saves go through a temporary file in
    the same directory followed by `os.replace`, so readers never observe a
    partially written document. Only one writer is expected at a time.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        *,
        prune_config: Optional[PruneConfig] = None,
    ) -> None:
        """Initialize the repository.

        Args:
            path: Journal file; defaults to ``~/.retidy/history.json``.
            prune_config: Retention limits applied whenever an operation is
                recorded. None disables automatic pruning.
        """
        self._path = Path(path if path is not None else DEFAULT_HISTORY_PATH).expanduser()
        self._prune_config = prune_config

    @property
    def path(self) -> Path:
        """Return the journal file location."""
        return self._path

    @property
    def prune_config(self) -> Optional[PruneConfig]:
        """Return the automatic pruning limits, if any."""
        return self._prune_config

    def load(self) -> HistoryStore:
        """Return the stored journal.

        A missing file yields an empty journal. A file that is not valid JSON or
        does not match the journal schema is renamed to
        ``<file>.backup.<epoch-ms>`` and an empty journal is returned.

        Raises:
            HistoryStoreError: If the file exists but cannot be read.
        """
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return HistoryStore()
        except UnicodeDecodeError as exc:
            return self._reset_corrupt(f"undecodable content: {exc}")
        except OSError as exc:
            raise HistoryStoreError(f"Unable to read history file {self._path}: {exc}") from exc

        try:
            return HistoryStore.model_validate(json.loads(content))
        except json.JSONDecodeError as exc:
            return self._reset_corrupt(f"invalid JSON: {exc}")
        except ValidationError as exc:
            return self._reset_corrupt(f"invalid structure: {exc.error_count()} error(s)")

    def save(self, store: HistoryStore) -> None:
        """Persist ``store`` atomically.

        Raises:
            HistoryStoreError: If the journal cannot be written.
        """
        payload = json.dumps(store.to_payload(), indent=2)
        temp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(payload)
                handle.write("\n")
            os.replace(temp_name, self._path)
        except OSError as exc:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise HistoryStoreError(f"Unable to write history file {self._path}: {exc}") from exc

    def update(self, mutate: Callable[[HistoryStore], Optional[HistoryStore]]) -> HistoryStore:
        """Load the journal, apply ``mutate``, and save the result.

        ``mutate`` may change the store in place and return None, or return a
        replacement store.
        """
        store = self.load()
        replacement = mutate(store)
        if replacement is not None:
            store = replacement
        self.save(store)
        return store

    def _reset_corrupt(self, reason: str) -> HistoryStore:
        backup = self._path.with_name(f"{self._path.name}.backup.{int(time.time() * 1000)}")
        try:
            os.replace(self._path, backup)
        except OSError as exc:
            LOGGER.warning("History file %s is corrupt (%s); backup failed: %s", self._path, reason, exc)
        else:
            LOGGER.warning(
                "History file %s is corrupt (%s); moved to %s", self._path, reason, backup
            )
        return HistoryStore()


def resolve_repository(repository: Optional[HistoryRepository]) -> HistoryRepository:
    """Return ``repository`` or a handle on the default journal."""
    return repository if repository is not None else HistoryRepository()


__all__ = ["HistoryRepository", "resolve_repository"]
