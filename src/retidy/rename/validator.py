"""Pre-flight validation for rename batches."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Iterable, Optional

from .directories import find_existing_ancestor
from .models import RenameProposal, ValidationErrorCode, ValidationIssue, ValidationResult


def validate_batch_rename(
    proposals: Iterable[RenameProposal],
    *,
    create_directories: bool = True,
) -> ValidationResult:
    """Check that every actionable proposal can be executed.

    Only proposals with status ``ready`` are inspected. Checks stop at the first
    problem for a proposal but continue across the batch. A target shared by
    several proposals is reported as ``TARGET_EXISTS`` for each of them.

    Args:
        proposals: Batch to validate.
        create_directories: Whether missing destination directories of moves will
            be created, in which case write access is required on the nearest
            existing ancestor instead.

    Returns:
        ValidationResult: ``valid`` is False when any error was collected.
    """
    ready = [proposal for proposal in proposals if proposal.status == "ready"]
    claimed = Counter(
        proposal.proposed_path
        for proposal in ready
        if proposal.proposed_path != proposal.original_path
    )

    errors: list[ValidationIssue] = []
    for proposal in ready:
        problem = _check_proposal(proposal, create_directories, claimed)
        if problem is None:
            continue
        code, message = problem
        errors.append(
            ValidationIssue(
                proposal_id=proposal.id,
                file_path=proposal.original_path,
                code=code,
                message=message,
            )
        )
    return ValidationResult(valid=not errors, errors=errors)


def _check_proposal(
    proposal: RenameProposal, create_directories: bool, claimed: Counter[str]
) -> Optional[tuple[ValidationErrorCode, str]]:
    source = Path(proposal.original_path)
    target = Path(proposal.proposed_path)

    if not source.exists():
        return "SOURCE_NOT_FOUND", f"Source file not found: {source}"

    if proposal.original_path != proposal.proposed_path and target.exists():
        return "TARGET_EXISTS", f"Target already exists: {target}"

    if claimed[proposal.proposed_path] > 1:
        return "TARGET_EXISTS", f"Target is also proposed for another file: {target}"

    if not os.access(source.parent, os.W_OK):
        return "NO_WRITE_PERMISSION", f"No write permission for directory: {source.parent}"

    if target.parent == source.parent:
        return None

    if proposal.is_move_operation and create_directories and not target.parent.exists():
        try:
            ancestor = find_existing_ancestor(target.parent)
        except OSError as exc:
            return (
                "NO_PERMISSION_TO_CREATE_DIRECTORY",
                f"Cannot inspect destination directory {target.parent}: {exc}",
            )
        if not os.access(ancestor, os.W_OK):
            return (
                "NO_PERMISSION_TO_CREATE_DIRECTORY",
                f"No permission to create directory under: {ancestor}",
            )
        return None

    if not os.access(target.parent, os.W_OK):
        return "NO_WRITE_PERMISSION", f"No write permission for directory: {target.parent}"
    return None


__all__ = ["validate_batch_rename"]
