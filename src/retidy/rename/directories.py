"""Destination directory provisioning."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

LOGGER = logging.getLogger(__name__)


def ensure_directory(path: Path | str) -> list[Path]:
    """Create ``path`` and any missing parents.

    Args:
        path: Directory that must exist after the call.

    Returns:
        list[Path]: Directories created by this call, shallowest first. Empty when
        ``path`` already existed or another process created it concurrently.

    Raises:
        OSError: If a directory cannot be created for any reason other than
            already existing.
    """
    target = Path(path)
    missing: list[Path] = []
    current = target
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent
    if not missing and not target.is_dir():
        raise NotADirectoryError(f"Not a directory: {target}")

    created: list[Path] = []
    for directory in reversed(missing):
        try:
            directory.mkdir()
        except FileExistsError:
            if not directory.is_dir():
                raise
            continue
        created.append(directory)
        LOGGER.debug("Created directory %s", directory)
    return created


def find_existing_ancestor(path: Path | str) -> Path:
    """Return the nearest existing directory at or above ``path``.

    Existing files along the way are skipped. The filesystem root is returned
    when nothing else exists.

    Raises:
        OSError: If a path cannot be inspected, e.g. for lack of permission.
    """
    current = Path(path)
    while True:
        try:
            mode = current.stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            pass
        else:
            if stat.S_ISDIR(mode):
                return current
        if current.parent == current:
            return current
        current = current.parent


__all__ = ["ensure_directory", "find_existing_ancestor"]
