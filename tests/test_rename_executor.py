"""Tests for batch rename execution."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from retidy.history import HistoryRepository, HistoryStoreError
from retidy.rename import (
    BatchExecutionError,
    BatchValidationError,
    CancellationToken,
    ExecuteRenameOptions,
    RenameError,
    RenameProposal,
    execute_batch_rename,
    load_proposals,
)


def _proposal(pid: str, source: Path, target: Path, **kwargs) -> RenameProposal:
    kwargs.setdefault("is_move_operation", source.parent != target.parent)
    return RenameProposal(
        id=pid,
        original_path=str(source),
        original_name=source.name,
        proposed_path=str(target),
        proposed_name=target.name,
        **kwargs,
    )


def _touch(path: Path, text: str = "data") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _no_history() -> ExecuteRenameOptions:
    return ExecuteRenameOptions(record_history=False)


def test_renames_files_and_records_history(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")
    source = _touch(tmp_path / "IMG_001.jpg", "pixels")
    target = tmp_path / "beach.jpg"

    result = execute_batch_rename([_proposal("1", source, target)], repository=repository)

    assert result.success is True
    assert not source.exists()
    assert target.read_text(encoding="utf-8") == "pixels"
    assert result.results[0].outcome == "success"
    assert result.results[0].new_path == str(target)
    assert result.results[0].new_name == "beach.jpg"
    assert result.summary.succeeded == 1
    assert result.completed_at >= result.started_at

    store = repository.load()
    assert result.history_entry_id == store.entries[0].id
    assert store.entries[0].operation_type == "rename"


def test_moves_create_missing_directories_once(tmp_path: Path) -> None:
    first = _touch(tmp_path / "a.jpg")
    second = _touch(tmp_path / "b.jpg")
    destination = tmp_path / "sorted" / "2024"

    result = execute_batch_rename(
        [
            _proposal("1", first, destination / "a.jpg"),
            _proposal("2", second, destination / "b.jpg"),
        ],
        _no_history(),
    )

    assert result.success is True
    assert result.directories_created == [str(tmp_path / "sorted"), str(destination)]
    assert result.summary.directories_created == 2
    assert (destination / "a.jpg").exists()
    assert (destination / "b.jpg").exists()


def test_non_actionable_proposals_are_skipped_with_reasons(tmp_path: Path) -> None:
    source = _touch(tmp_path / "keep.txt")
    proposals = [
        _proposal("1", source, source, status="no-change"),
        _proposal("2", source, tmp_path / "x.txt", status="conflict"),
        _proposal("3", source, source),
    ]

    result = execute_batch_rename(proposals, _no_history())

    assert [(item.proposal_id, item.outcome, item.error) for item in result.results] == [
        ("1", "skipped", "No change needed"),
        ("2", "skipped", "Status: conflict"),
        ("3", "skipped", "Name unchanged"),
    ]
    assert result.success is True
    assert source.exists()


def test_validation_failure_raises_before_any_rename(tmp_path: Path) -> None:
    first = _touch(tmp_path / "first.txt")
    second = _touch(tmp_path / "second.txt")
    occupied = _touch(tmp_path / "occupied.txt", "keep me")

    with pytest.raises(BatchValidationError) as excinfo:
        execute_batch_rename(
            [
                _proposal("1", first, tmp_path / "renamed.txt"),
                _proposal("2", second, occupied),
            ],
            _no_history(),
        )

    assert [error.code for error in excinfo.value.validation.errors] == ["TARGET_EXISTS"]
    assert "Validation failed: 1 error(s)" in str(excinfo.value)
    assert first.exists()
    assert not (tmp_path / "renamed.txt").exists()
    assert occupied.read_text(encoding="utf-8") == "keep me"


def test_cancellation_skips_remaining_files(tmp_path: Path) -> None:
    proposals = [
        _proposal(str(index), _touch(tmp_path / f"in_{index}.txt"), tmp_path / f"out_{index}.txt")
        for index in range(10)
    ]
    token = CancellationToken()
    progress: list[tuple[int, int]] = []

    def _on_progress(completed: int, total: int, _result) -> None:
        progress.append((completed, total))
        if completed == 3:
            token.cancel()

    result = execute_batch_rename(
        proposals,
        ExecuteRenameOptions(on_progress=_on_progress, cancel_token=token, record_history=False),
    )

    assert result.aborted is True
    assert progress == [(1, 10), (2, 10), (3, 10)]
    assert result.summary.succeeded == 3
    assert result.summary.skipped == 7
    assert all(item.error == "Operation cancelled" for item in result.results[3:])
    assert (tmp_path / "out_2.txt").exists()
    assert (tmp_path / "in_3.txt").exists()


def test_per_file_failures_do_not_stop_the_batch(tmp_path: Path) -> None:
    good = _touch(tmp_path / "good.txt")
    proposals = [
        _proposal("1", tmp_path / "vanished.txt", tmp_path / "never.txt"),
        _proposal("2", good, tmp_path / "better.txt"),
    ]

    result = execute_batch_rename(
        proposals, ExecuteRenameOptions(skip_validation=True, record_history=False)
    )

    assert result.success is False
    assert [item.outcome for item in result.results] == ["failed", "success"]
    assert result.results[0].error
    assert result.summary.failed == 1
    assert result.summary.succeeded == 1


def test_duplicate_targets_fail_validation(tmp_path: Path) -> None:
    first = _touch(tmp_path / "a.txt", "AAA")
    second = _touch(tmp_path / "b.txt", "BBB")
    photo = tmp_path / "photo.txt"

    with pytest.raises(BatchValidationError) as excinfo:
        execute_batch_rename(
            [_proposal("1", first, photo), _proposal("2", second, photo)], _no_history()
        )

    assert [error.code for error in excinfo.value.validation.errors] == [
        "TARGET_EXISTS",
        "TARGET_EXISTS",
    ]
    assert first.exists() and second.exists()
    assert not photo.exists()


def test_existing_target_is_never_overwritten_without_validation(tmp_path: Path) -> None:
    first = _touch(tmp_path / "a.txt", "AAA")
    second = _touch(tmp_path / "b.txt", "BBB")
    photo = tmp_path / "photo.txt"

    result = execute_batch_rename(
        [_proposal("1", first, photo), _proposal("2", second, photo)],
        ExecuteRenameOptions(skip_validation=True, record_history=False),
    )

    assert [item.outcome for item in result.results] == ["success", "failed"]
    assert result.results[1].error == f"Target already exists: {photo}"
    assert result.success is False
    assert photo.read_text(encoding="utf-8") == "AAA"
    assert second.read_text(encoding="utf-8") == "BBB"


def test_directory_creation_failure_marks_only_that_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _boom(_path):
        raise PermissionError("denied")

    monkeypatch.setattr("retidy.rename.executor.ensure_directory", _boom)
    moved = _touch(tmp_path / "moved.txt")
    renamed = _touch(tmp_path / "renamed.txt")

    result = execute_batch_rename(
        [
            _proposal("1", moved, tmp_path / "new" / "moved.txt"),
            _proposal("2", renamed, tmp_path / "renamed2.txt"),
        ],
        _no_history(),
    )

    assert result.results[0].outcome == "failed"
    assert result.results[0].error == "Failed to create directory: denied"
    assert result.results[1].outcome == "success"
    assert moved.exists()


@pytest.mark.parametrize("error", [HistoryStoreError("disk full"), ValueError("disk full")])
def test_recorder_failure_is_logged_and_ignored(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    error: Exception,
) -> None:
    def _fail(*_args, **_kwargs):
        raise error

    monkeypatch.setattr("retidy.history.recorder.record_operation", _fail)
    source = _touch(tmp_path / "a.txt")

    with caplog.at_level(logging.WARNING, logger="retidy.rename.executor"):
        result = execute_batch_rename(
            [_proposal("1", source, tmp_path / "b.txt")],
            repository=HistoryRepository(tmp_path / "history.json"),
        )

    assert result.success is True
    assert result.history_entry_id is None
    assert "disk full" in caplog.text


def test_disabled_history_leaves_store_untouched(tmp_path: Path) -> None:
    repository = HistoryRepository(tmp_path / "history.json")
    source = _touch(tmp_path / "a.txt")

    result = execute_batch_rename(
        [_proposal("1", source, tmp_path / "b.txt")], _no_history(), repository=repository
    )

    assert result.history_entry_id is None
    assert not repository.path.exists()


def test_unexpected_errors_raise_batch_execution_error(tmp_path: Path) -> None:
    """Renames completed before the failure are reported and journaled."""
    repository = HistoryRepository(tmp_path / "history.json")
    first = _touch(tmp_path / "a.txt")
    second = _touch(tmp_path / "b.txt")

    def _explode(*_args) -> None:
        raise RuntimeError("callback broke")

    with pytest.raises(BatchExecutionError, match="callback broke") as excinfo:
        execute_batch_rename(
            [
                _proposal("1", first, tmp_path / "a2.txt"),
                _proposal("2", second, tmp_path / "b2.txt"),
            ],
            ExecuteRenameOptions(on_progress=_explode),
            repository=repository,
        )

    partial = excinfo.value.result
    assert partial is not None
    assert partial.success is False
    assert partial.aborted is True
    assert [item.outcome for item in partial.results] == ["success"]
    assert (tmp_path / "a2.txt").exists()
    assert second.exists()

    store = repository.load()
    assert partial.history_entry_id == store.entries[0].id
    assert [record.new_path for record in store.entries[0].files] == [str(tmp_path / "a2.txt")]


def test_load_proposals_accepts_list_and_wrapped_documents(tmp_path: Path) -> None:
    record = {
        "id": "p1",
        "originalPath": "/in/a.txt",
        "originalName": "a.txt",
        "proposedPath": "/in/b.txt",
        "proposedName": "b.txt",
        "status": "ready",
        "issues": [],
    }
    listed = tmp_path / "list.json"
    listed.write_text(json.dumps([record]), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"proposals": [record]}), encoding="utf-8")

    for path in (listed, wrapped):
        proposals = load_proposals(path)
        assert len(proposals) == 1
        assert proposals[0].proposed_path == "/in/b.txt"
        assert proposals[0].is_move_operation is False


def test_load_proposals_rejects_invalid_documents(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    wrong = tmp_path / "wrong.json"
    wrong.write_text(json.dumps({"items": []}), encoding="utf-8")
    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps([{"id": "x"}]), encoding="utf-8")

    for path in (broken, wrong, invalid, tmp_path / "missing.json"):
        with pytest.raises(RenameError):
            load_proposals(path)
