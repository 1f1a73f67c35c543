"""Batch rename detection, validation, and execution."""

from .directories import ensure_directory, find_existing_ancestor
from .errors import BatchExecutionError, BatchValidationError, RenameError
from .executor import (
    CancellationToken,
    ExecuteRenameOptions,
    execute_batch_rename,
    load_proposals,
)
from .issues import (
    DetailedIssue,
    DetectionContext,
    FixStrategy,
    IssueReport,
    detect_batch_issues,
    detect_issues,
    summarize_issues,
)
from .models import (
    BatchRenameResult,
    BatchRenameSummary,
    FileRenameResult,
    RenameIssue,
    RenameProposal,
    ValidationIssue,
    ValidationResult,
)
from .validator import validate_batch_rename

__all__ = [
    "BatchExecutionError",
    "BatchRenameResult",
    "BatchRenameSummary",
    "BatchValidationError",
    "CancellationToken",
    "DetailedIssue",
    "DetectionContext",
    "ExecuteRenameOptions",
    "FileRenameResult",
    "FixStrategy",
    "IssueReport",
    "RenameError",
    "RenameIssue",
    "RenameProposal",
    "ValidationIssue",
    "ValidationResult",
    "detect_batch_issues",
    "detect_issues",
    "ensure_directory",
    "execute_batch_rename",
    "find_existing_ancestor",
    "load_proposals",
    "summarize_issues",
    "validate_batch_rename",
]
