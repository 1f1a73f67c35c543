"""Errors raised by batch rename execution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BatchRenameResult, ValidationResult


class RenameError(Exception):
    """Base exception for batch rename operations."""


class BatchValidationError(RenameError):
    """Raised when pre-flight validation rejects a batch before any file is touched."""

    def __init__(self, validation: "ValidationResult") -> None:
        self.validation = validation
        count = len(validation.errors)
        first = validation.errors[0] if validation.errors else None
        detail = f" First: [{first.code}] {first.message}" if first else ""
        super().__init__(f"Validation failed: {count} error(s).{detail}")


class BatchExecutionError(RenameError):
    """Raised when a batch stops on an unexpected error rather than a per-file failure.

    ``result`` carries the outcomes reached before the batch stopped.
    """

    def __init__(self, message: str, *, result: "BatchRenameResult | None" = None) -> None:
        super().__init__(message)
        self.result = result
