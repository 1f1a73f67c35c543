"""Issue and conflict detection for a batch of rename proposals.

Detection is pure: it compares a proposal against the other proposals of its
batch and, only when asked to, against a set of paths that already exist on
disk. Issues reported by the upstream naming engine are not re-derived; they
are converted into the same `DetailedIssue` shape so callers can treat both
kinds uniformly.
"""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Iterable, List, Literal, Optional, Sequence

from pydantic import Field

from .models import RecordModel, RenameIssue, RenameProposal

DUPLICATE_PROPOSED = "DUPLICATE_PROPOSED"
FILE_EXISTS = "FILE_EXISTS"
CASE_CONFLICT = "CASE_CONFLICT"

EXISTING_FILE_SUFFIX = "_new"

IssueSeverity = Literal["error", "warning", "info"]


class FixStrategy(str, Enum):
    """How an auto-fixable issue derives a replacement file name."""

    APPEND_COUNTER = "append_counter"
    APPEND_SUFFIX = "append_suffix"


class AutoFix(RecordModel):
    """Parameters of an automatic fix; apply with `apply_fix`."""

    strategy: FixStrategy
    counter: Optional[int] = None
    suffix: Optional[str] = None


class DetailedIssue(RecordModel):
    """An issue enriched with severity and fix information.

    Attributes:
        code: Issue identifier.
        message: Human-readable description.
        field: Field the issue refers to, for upstream issues.
        severity: ``error`` issues block execution; ``warning``/``info`` do not.
        suggestion: Hint shown to the user.
        auto_fixable: Whether `fix` can resolve the issue without user input.
        fix: Fix parameters, present for auto-fixable detected issues.
        fixed_name: File name produced by applying `fix` to the proposed name.
    """

    code: str
    message: str
    field: Optional[str] = None
    severity: IssueSeverity
    suggestion: Optional[str] = None
    auto_fixable: bool = False
    fix: Optional[AutoFix] = None
    fixed_name: Optional[str] = None


class IssueReport(RecordModel):
    """All issues for one proposal."""

    proposal_id: str
    file_path: str
    file_name: str
    issues: List[DetailedIssue] = Field(default_factory=list)
    can_proceed: bool = True


@dataclass(frozen=True, slots=True)
class DetectionContext:
    """Batch context used when detecting issues for a single proposal.

    Attributes:
        proposals: Every proposal in the batch, including the one being checked.
        check_file_system: Whether to report targets that already exist on disk.
        existing_files: Known existing paths; when omitted the disk is queried.
    """

    proposals: Sequence[RenameProposal]
    check_file_system: bool = False
    existing_files: Optional[AbstractSet[str]] = None


def detect_issues(proposal: RenameProposal, context: DetectionContext) -> list[DetailedIssue]:
    """Return the conflicts affecting ``proposal`` within its batch.

    Args:
        proposal: Proposal to inspect.
        context: Batch siblings and filesystem options.

    Returns:
        list[DetailedIssue]: Detected issues, possibly several for one proposal.
    """
    issues: list[DetailedIssue] = []
    proposals = context.proposals

    duplicates = [
        other
        for other in proposals
        if other.id != proposal.id and other.proposed_path == proposal.proposed_path
    ]
    if duplicates:
        counter = _duplicate_counters(proposal.proposed_path, proposals).get(proposal.id, 2)
        fix = AutoFix(strategy=FixStrategy.APPEND_COUNTER, counter=counter)
        issues.append(
            DetailedIssue(
                code=DUPLICATE_PROPOSED,
                message=f"{len(duplicates)} other file(s) would have the same name",
                severity="error",
                suggestion="Add a unique counter to the name",
                auto_fixable=True,
                fix=fix,
                fixed_name=apply_fix(fix, proposal.proposed_name),
            )
        )

    if context.check_file_system and _target_exists(proposal, context.existing_files):
        fix = AutoFix(strategy=FixStrategy.APPEND_SUFFIX, suffix=EXISTING_FILE_SUFFIX)
        issues.append(
            DetailedIssue(
                code=FILE_EXISTS,
                message="A file with this name already exists",
                severity="error",
                suggestion="Choose a different name or add a suffix",
                auto_fixable=True,
                fix=fix,
                fixed_name=apply_fix(fix, proposal.proposed_name),
            )
        )

    lowered = proposal.proposed_path.lower()
    case_conflicts = [
        other
        for other in proposals
        if other.id != proposal.id
        and other.proposed_path != proposal.proposed_path
        and other.proposed_path.lower() == lowered
    ]
    if case_conflicts:
        issues.append(
            DetailedIssue(
                code=CASE_CONFLICT,
                message="Name differs only in letter case from another file",
                severity="warning",
                suggestion="Case-insensitive filesystems treat these names as the same file",
                auto_fixable=False,
            )
        )

    return issues


def detect_batch_issues(
    proposals: Sequence[RenameProposal],
    *,
    check_file_system: bool = False,
    existing_files: Optional[AbstractSet[str]] = None,
) -> list[IssueReport]:
    """Build an `IssueReport` for every proposal in the batch.

    Upstream issues carried on each proposal are converted and listed after the
    detected ones.
    """
    context = DetectionContext(
        proposals=proposals,
        check_file_system=check_file_system,
        existing_files=existing_files,
    )
    reports = []
    for proposal in proposals:
        issues = detect_issues(proposal, context) + convert_proposal_issues(proposal.issues)
        reports.append(create_issue_report(proposal, issues))
    return reports


def convert_proposal_issues(proposal_issues: Iterable[RenameIssue]) -> list[DetailedIssue]:
    """Wrap upstream issues with severity, suggestion, and fixability."""
    return [
        DetailedIssue(
            code=issue.code,
            message=issue.message,
            field=issue.field,
            severity=_severity_for_code(issue.code),
            suggestion=_suggestion_for_code(issue.code, issue.field),
            auto_fixable="DUPLICATE" in issue.code,
        )
        for issue in proposal_issues
    ]


def create_issue_report(proposal: RenameProposal, issues: list[DetailedIssue]) -> IssueReport:
    """Return the report for ``proposal``; error-severity issues block it."""
    return IssueReport(
        proposal_id=proposal.id,
        file_path=proposal.original_path,
        file_name=proposal.original_name,
        issues=issues,
        can_proceed=not any(issue.severity == "error" for issue in issues),
    )


def summarize_issues(reports: Iterable[IssueReport]) -> dict[str, int]:
    """Count issues per code plus the number of blocked proposals."""
    counts: Counter[str] = Counter()
    blocked = 0
    for report in reports:
        counts.update(issue.code for issue in report.issues)
        if not report.can_proceed:
            blocked += 1
    summary = dict(sorted(counts.items()))
    summary["blocked"] = blocked
    return summary


def apply_fix(fix: AutoFix, name: str) -> str:
    """Return ``name`` with ``fix`` applied."""
    if fix.strategy is FixStrategy.APPEND_COUNTER:
        return add_counter(name, fix.counter if fix.counter is not None else 2)
    return add_suffix(name, fix.suffix or EXISTING_FILE_SUFFIX)


def suggest_fix(issue: DetailedIssue, name: str) -> Optional[str]:
    """Return the name that resolves ``issue`` for ``name``, or None when it needs a person."""
    if not issue.auto_fixable or issue.fix is None:
        return None
    return apply_fix(issue.fix, name)


def add_counter(name: str, counter: int) -> str:
    """Insert ``_<counter>`` before the extension: ``photo.jpg`` -> ``photo_2.jpg``."""
    return add_suffix(name, f"_{counter}")


def add_suffix(name: str, suffix: str) -> str:
    """Insert ``suffix`` before the extension, or append it when there is none."""
    stem, extension = os.path.splitext(name)
    return f"{stem}{suffix}{extension}"


def _duplicate_counters(path: str, proposals: Sequence[RenameProposal]) -> dict[str, int]:
    """Assign each proposal targeting ``path`` a counter whose result is free in the batch."""
    taken = {proposal.proposed_path for proposal in proposals}
    directory, name = os.path.split(path)
    counters: dict[str, int] = {}
    counter = 1
    for proposal in proposals:
        if proposal.proposed_path != path:
            continue
        counter += 1
        while os.path.join(directory, add_counter(name, counter)) in taken:
            counter += 1
        counters[proposal.id] = counter
    return counters


def _target_exists(proposal: RenameProposal, existing: Optional[AbstractSet[str]]) -> bool:
    if proposal.proposed_path == proposal.original_path:
        return False
    if existing is not None:
        return proposal.proposed_path in existing
    return os.path.exists(proposal.proposed_path)


def _severity_for_code(code: str) -> IssueSeverity:
    if "MISSING" in code or "EMPTY" in code:
        return "warning"
    if "INVALID" in code or "CONFLICT" in code or "EXISTS" in code:
        return "error"
    return "info"


def _suggestion_for_code(code: str, field: Optional[str]) -> Optional[str]:
    if "MISSING" in code and field:
        return f"Provide a value for {field} or use a fallback"
    if "EMPTY" in code:
        return "Use a fallback value or a different placeholder"
    if "INVALID" in code:
        return "Remove or replace invalid characters"
    return None


__all__ = [
    "CASE_CONFLICT",
    "DUPLICATE_PROPOSED",
    "FILE_EXISTS",
    "AutoFix",
    "DetailedIssue",
    "DetectionContext",
    "FixStrategy",
    "IssueReport",
    "IssueSeverity",
    "add_counter",
    "add_suffix",
    "apply_fix",
    "convert_proposal_issues",
    "create_issue_report",
    "detect_batch_issues",
    "detect_issues",
    "suggest_fix",
    "summarize_issues",
]
