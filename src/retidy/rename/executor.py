"""Sequential execution of rename batches."""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from .directories import ensure_directory
from .errors import BatchExecutionError, BatchValidationError, RenameError
from .models import BatchRenameResult, BatchRenameSummary, FileRenameResult, RenameProposal
from .validator import validate_batch_rename

if TYPE_CHECKING:
    from retidy.history import HistoryRepository

LOGGER = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Operation cancelled"

ProgressCallback = Callable[[int, int, FileRenameResult], None]

_PROPOSAL_LIST = TypeAdapter(list[RenameProposal])


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and the executor."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request that the running batch stop before its next file."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return whether cancellation has been requested."""
        return self._event.is_set()


@dataclass(slots=True)
class ExecuteRenameOptions:
    """Options for `execute_batch_rename`.

    Attributes:
        on_progress: Called as ``(completed, total, result)`` after each file.
        cancel_token: Token checked before each file.
        skip_validation: Skip the pre-flight validation pass.
        create_directories: Create missing destination directories for moves.
        record_history: Record the batch in the history journal.
    """

    on_progress: Optional[ProgressCallback] = None
    cancel_token: Optional[CancellationToken] = None
    skip_validation: bool = False
    create_directories: bool = True
    record_history: bool = True


def execute_batch_rename(
    proposals: Iterable[RenameProposal],
    options: ExecuteRenameOptions | None = None,
    *,
    repository: "HistoryRepository | None" = None,
) -> BatchRenameResult:
    """Rename or move every actionable proposal, one file at a time.

    Per-file failures are reported in the result and never stop the batch.
    Files already renamed stay renamed when the batch is cancelled.

    Args:
        proposals: Proposals to execute.
        options: Execution options; defaults apply when omitted.
        repository: History journal to record into; the default journal is used
            when omitted.

    Returns:
        BatchRenameResult: Per-file outcomes and the batch summary.

    Raises:
        BatchValidationError: If pre-flight validation finds any problem. No file
            is touched in that case.
        BatchExecutionError: If processing stops on an unexpected error. Its
            ``result`` holds the outcomes reached so far, already journaled.
    """
    options = options or ExecuteRenameOptions()
    proposals = list(proposals)
    started_at = datetime.now(timezone.utc)
    clock = time.perf_counter()

    actionable = [proposal for proposal in proposals if proposal.is_actionable]
    skipped = [proposal for proposal in proposals if not proposal.is_actionable]

    if not options.skip_validation:
        validation = validate_batch_rename(
            actionable, create_directories=options.create_directories
        )
        if not validation.valid:
            raise BatchValidationError(validation)

    results: list[FileRenameResult] = []
    directories_created: list[str] = []
    aborted = False
    failure: Exception | None = None
    total = len(actionable)

    try:
        for proposal in actionable:
            token = options.cancel_token
            if aborted or (token is not None and token.cancelled):
                aborted = True
                results.append(_skipped(proposal, CANCELLED_MESSAGE))
                continue

            result = _execute_one(proposal, options.create_directories, directories_created)
            LOGGER.debug("%s: %s", proposal.original_path, result.outcome)
            results.append(result)
            if options.on_progress is not None:
                options.on_progress(len(results), total, result)
    except Exception as exc:
        failure = exc
        aborted = True

    results.extend(_skipped(proposal, _skip_reason(proposal)) for proposal in skipped)

    summary = _summarize(results, len(directories_created))
    completed_at = datetime.now(timezone.utc)
    batch = BatchRenameResult(
        success=summary.failed == 0 and failure is None,
        results=results,
        summary=summary,
        started_at=started_at,
        completed_at=completed_at,
        duration_ms=int((time.perf_counter() - clock) * 1000),
        aborted=aborted,
        directories_created=directories_created,
    )

    if options.record_history:
        _record_history(batch, repository)

    if failure is not None:
        raise BatchExecutionError(
            f"Batch rename stopped unexpectedly: {failure}", result=batch
        ) from failure
    return batch


def load_proposals(path: Path | str) -> list[RenameProposal]:
    """Read proposals from a JSON document.

    The document is either a list of proposals or an object with a
    ``proposals`` list.

    Raises:
        RenameError: If the file cannot be read or does not describe proposals.
    """
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RenameError(f"Unable to read proposals from {source}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RenameError(f"Invalid proposal document {source}: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("proposals")
    if not isinstance(payload, list):
        raise RenameError(f"Proposal document {source} must contain a list of proposals.")

    try:
        return _PROPOSAL_LIST.validate_python(payload)
    except ValidationError as exc:
        raise RenameError(f"Invalid proposal document {source}: {exc}") from exc


def _record_history(batch: BatchRenameResult, repository: "HistoryRepository | None") -> None:
    """Journal ``batch``; a journal failure never fails the renames already made."""
    from retidy.history.recorder import record_operation

    try:
        entry = record_operation(batch, repository=repository)
    except Exception as exc:
        LOGGER.warning("Failed to record rename batch in history: %s", exc)
    else:
        batch.history_entry_id = entry.id


def _execute_one(
    proposal: RenameProposal,
    create_directories: bool,
    directories_created: list[str],
) -> FileRenameResult:
    target = Path(proposal.proposed_path)

    # os.rename replaces an existing destination on POSIX.
    if proposal.proposed_path != proposal.original_path and os.path.lexists(target):
        return _failed(proposal, f"Target already exists: {target}")

    if proposal.is_move_operation and create_directories and not target.parent.exists():
        try:
            created = ensure_directory(target.parent)
        except OSError as exc:
            return _failed(proposal, f"Failed to create directory: {exc}")
        for directory in created:
            if str(directory) not in directories_created:
                directories_created.append(str(directory))

    try:
        os.rename(proposal.original_path, proposal.proposed_path)
    except OSError as exc:
        return _failed(proposal, str(exc))

    return FileRenameResult(
        proposal_id=proposal.id,
        original_path=proposal.original_path,
        original_name=proposal.original_name,
        new_path=proposal.proposed_path,
        new_name=proposal.proposed_name,
        outcome="success",
        is_move_operation=proposal.is_move_operation,
    )


def _failed(proposal: RenameProposal, error: str) -> FileRenameResult:
    return FileRenameResult(
        proposal_id=proposal.id,
        original_path=proposal.original_path,
        original_name=proposal.original_name,
        outcome="failed",
        error=error,
        is_move_operation=proposal.is_move_operation,
    )


def _skipped(proposal: RenameProposal, reason: str) -> FileRenameResult:
    return FileRenameResult(
        proposal_id=proposal.id,
        original_path=proposal.original_path,
        original_name=proposal.original_name,
        outcome="skipped",
        error=reason,
        is_move_operation=proposal.is_move_operation,
    )


def _skip_reason(proposal: RenameProposal) -> str:
    if proposal.status == "no-change":
        return "No change needed"
    if proposal.status != "ready":
        return f"Status: {proposal.status}"
    return "Name unchanged"


def _summarize(results: list[FileRenameResult], directories: int) -> BatchRenameSummary:
    summary = BatchRenameSummary(total=len(results), directories_created=directories)
    for result in results:
        if result.outcome == "success":
            summary.succeeded += 1
        elif result.outcome == "skipped":
            summary.skipped += 1
        else:
            summary.failed += 1
    return summary


__all__ = [
    "CANCELLED_MESSAGE",
    "CancellationToken",
    "ExecuteRenameOptions",
    "ProgressCallback",
    "execute_batch_rename",
    "load_proposals",
]
