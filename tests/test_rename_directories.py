"""Tests for destination directory provisioning."""

from __future__ import annotations

from pathlib import Path

import pytest

from retidy.rename.directories import ensure_directory, find_existing_ancestor


def test_ensure_directory_reports_each_created_level(tmp_path: Path) -> None:
    target = tmp_path / "2024" / "01" / "trip"

    created = ensure_directory(target)

    assert created == [tmp_path / "2024", tmp_path / "2024" / "01", target]
    assert target.is_dir()


def test_ensure_directory_existing_returns_empty(tmp_path: Path) -> None:
    (tmp_path / "present").mkdir()

    assert ensure_directory(tmp_path / "present") == []


def test_ensure_directory_treats_concurrent_creation_as_not_created(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    original_mkdir = Path.mkdir

    def _racing_mkdir(self: Path, *args, **kwargs) -> None:
        original_mkdir(self, *args, **kwargs)
        raise FileExistsError(str(self))

    monkeypatch.setattr(Path, "mkdir", _racing_mkdir)

    assert ensure_directory(tmp_path / "raced") == []
    assert (tmp_path / "raced").is_dir()


def test_ensure_directory_propagates_other_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(OSError):
        ensure_directory(blocker / "child")


def test_find_existing_ancestor_walks_up_to_directory(tmp_path: Path) -> None:
    assert find_existing_ancestor(tmp_path / "a" / "b" / "c") == tmp_path
    assert find_existing_ancestor(tmp_path) == tmp_path


def test_find_existing_ancestor_skips_files(tmp_path: Path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("data", encoding="utf-8")

    assert find_existing_ancestor(blocker / "sub") == tmp_path
