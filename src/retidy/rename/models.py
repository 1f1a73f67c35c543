"""Data models shared by the rename detector, validator, and executor."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RenameStatus = Literal["ready", "conflict", "missing-data", "no-change", "invalid-name"]
RenameOutcome = Literal["success", "skipped", "failed"]
ValidationErrorCode = Literal[
    "SOURCE_NOT_FOUND",
    "TARGET_EXISTS",
    "NO_WRITE_PERMISSION",
    "NO_PERMISSION_TO_CREATE_DIRECTORY",
]


class RecordModel(BaseModel):
    """Base model whose serialized field names are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready mapping using the persisted field names."""
        return self.model_dump(mode="json", by_alias=True)


class RenameIssue(RecordModel):
    """Issue attached to a proposal by the upstream naming engine.

    Attributes:
        code: Machine-readable issue identifier such as ``MISSING_REQUIRED``.
        message: Human-readable explanation.
        field: Placeholder or metadata field the issue refers to, if any.
    """

    code: str
    message: str
    field: Optional[str] = None


class RenameProposal(RecordModel):
    """A pending rename or move decision produced outside this package.

    Attributes:
        id: Identifier unique within the batch.
        original_path: Current absolute path of the file.
        original_name: Current file name.
        proposed_path: Destination path after execution.
        proposed_name: Destination file name.
        status: Readiness of the proposal.
        issues: Issues reported by the naming engine.
        is_move_operation: Whether the destination lives in another directory.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    original_path: str
    original_name: str
    proposed_path: str
    proposed_name: str
    status: RenameStatus = "ready"
    issues: List[RenameIssue] = Field(default_factory=list)
    is_move_operation: bool = False

    @property
    def is_actionable(self) -> bool:
        """Return whether executing the proposal would change the filesystem."""
        if self.status != "ready":
            return False
        return self.original_name != self.proposed_name or self.is_move_operation


class FileRenameResult(RecordModel):
    """Outcome for one proposal processed by the executor."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    proposal_id: str
    original_path: str
    original_name: str
    new_path: Optional[str] = None
    new_name: Optional[str] = None
    outcome: RenameOutcome
    error: Optional[str] = None
    is_move_operation: bool = False


class BatchRenameSummary(RecordModel):
    """Outcome counts for a batch."""

    total: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    directories_created: int = 0


class BatchRenameResult(RecordModel):
    """Aggregate result of one `execute_batch_rename` call.

    Attributes:
        success: True when no file failed.
        results: Per-proposal outcomes, actionable ones first in execution order.
        summary: Outcome counts.
        started_at: Time the batch started.
        completed_at: Time the batch finished.
        duration_ms: Wall-clock duration in milliseconds.
        aborted: Whether the batch was cancelled before finishing.
        directories_created: Directories created while executing moves.
        history_entry_id: Journal entry id when the batch was recorded.
    """

    success: bool
    results: List[FileRenameResult] = Field(default_factory=list)
    summary: BatchRenameSummary = Field(default_factory=BatchRenameSummary)
    started_at: datetime
    completed_at: datetime
    duration_ms: int = 0
    aborted: bool = False
    directories_created: List[str] = Field(default_factory=list)
    history_entry_id: Optional[str] = None


class ValidationIssue(RecordModel):
    """A blocking problem found during pre-flight validation."""

    proposal_id: str
    file_path: str
    code: ValidationErrorCode
    message: str


class ValidationResult(RecordModel):
    """Outcome of validating a batch."""

    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)


__all__ = [
    "BatchRenameResult",
    "BatchRenameSummary",
    "FileRenameResult",
    "RecordModel",
    "RenameIssue",
    "RenameOutcome",
    "RenameProposal",
    "RenameStatus",
    "ValidationErrorCode",
    "ValidationIssue",
    "ValidationResult",
]
