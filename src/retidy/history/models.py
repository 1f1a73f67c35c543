"""History journal data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from retidy.rename.models import RecordModel

HISTORY_STORE_VERSION = 1

OperationType = Literal["rename", "move", "organize"]


class FileHistoryRecord(RecordModel):
    """One file of a recorded batch."""

    original_path: str
    new_path: Optional[str] = None
    is_move_operation: bool = False
    success: bool
    error: Optional[str] = None


class OperationSummary(RecordModel):
    """Outcome counts stored with a journal entry."""

    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    directories_created: int = 0


class OperationHistoryEntry(RecordModel):
    """A recorded batch operation.

    Attributes:
        id: UUID4 identifier.
        timestamp: Time the batch was recorded (UTC).
        operation_type: ``move`` when any file changed directory, else ``rename``.
        file_count: Number of files in the batch result.
        summary: Outcome counts.
        duration_ms: Execution time of the batch.
        files: Per-file records.
        directories_created: Directories created for the batch, shallowest first.
        undone_at: Time the entry was undone; None while it is active.
    """

    id: str
    timestamp: datetime
    operation_type: OperationType
    file_count: int
    summary: OperationSummary = Field(default_factory=OperationSummary)
    duration_ms: int = 0
    files: List[FileHistoryRecord] = Field(default_factory=list)
    directories_created: List[str] = Field(default_factory=list)
    undone_at: Optional[datetime] = None

    @field_validator("timestamp", "undone_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_undone(self) -> bool:
        return self.undone_at is not None


class HistoryStore(RecordModel):
    """The persisted journal document; entries are newest first."""

    version: int = HISTORY_STORE_VERSION
    last_pruned: Optional[datetime] = None
    entries: List[OperationHistoryEntry] = Field(default_factory=list)


class PruneConfig(RecordModel):
    """Retention limits; zero disables a limit."""

    max_entries: int = Field(100, ge=0)
    max_age_days: int = Field(30, ge=0)


class UndoFileResult(RecordModel):
    """Outcome of reversing one file."""

    original_path: str
    current_path: Optional[str] = None
    success: bool = False
    error: Optional[str] = None
    skip_reason: Optional[str] = None


class UndoResult(RecordModel):
    """Outcome of undoing one journal entry."""

    operation_id: str
    success: bool
    dry_run: bool = False
    files_restored: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    directories_removed: List[str] = Field(default_factory=list)
    files: List[UndoFileResult] = Field(default_factory=list)
    duration_ms: int = 0


class FileOperationEntry(RecordModel):
    """A journal entry that touched a looked-up file."""

    operation_id: str
    operation_type: OperationType
    timestamp: datetime
    original_path: str
    new_path: Optional[str] = None


class FileHistoryLookup(RecordModel):
    """Lineage of a file across the journal."""

    found: bool
    searched_path: str
    original_path: Optional[str] = None
    current_path: Optional[str] = None
    is_at_original: bool = False
    last_modified: Optional[datetime] = None
    last_operation_id: Optional[str] = None
    operations: List[FileOperationEntry] = Field(default_factory=list)


class RestoreResult(RecordModel):
    """Outcome of restoring a file to its original location."""

    success: bool
    dry_run: bool = False
    searched_path: str
    original_path: Optional[str] = None
    previous_path: Optional[str] = None
    operation_id: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    duration_ms: int = 0


@dataclass(slots=True)
class UndoOptions:
    """Options for `undo_operation`.

    Attributes:
        dry_run: Evaluate every file without touching the disk or the journal.
        force: Restore what can be restored even when some files would fail.
    """

    dry_run: bool = False
    force: bool = False


@dataclass(slots=True)
class RestoreOptions:
    """Options for `restore_file`.

    Attributes:
        dry_run: Report what would happen without moving anything.
        operation_id: Undo this whole journal entry instead of one file.
        lookup_only: Only report the file's lineage.
    """

    dry_run: bool = False
    operation_id: Optional[str] = None
    lookup_only: bool = False


__all__ = [
    "HISTORY_STORE_VERSION",
    "FileHistoryLookup",
    "FileHistoryRecord",
    "FileOperationEntry",
    "HistoryStore",
    "OperationHistoryEntry",
    "OperationSummary",
    "OperationType",
    "PruneConfig",
    "RestoreOptions",
    "RestoreResult",
    "UndoFileResult",
    "UndoOptions",
    "UndoResult",
]
