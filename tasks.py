"""Invoke tasks for developing retidy.

Every task shells out to `uv` so local runs use the same environment as CI.
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
SOURCE_PATHS = ("src", "tests", "tasks.py")


def _uv(ctx: Context, *args: str, echo: bool = True) -> None:
    """Run ``uv`` with ``args`` from the project root."""
    with ctx.cd(str(PROJECT_ROOT)):
        ctx.run(shlex.join(("uv", *args)), echo=echo, pty=True)


@task(help={"dev": "Install the dev extra (pytest, ruff, mypy, invoke)."})
def sync(ctx: Context, dev: bool = True) -> None:
    """Create or refresh the virtual environment."""
    _uv(ctx, "sync", *(["--extra", "dev"] if dev else []))


@task(help={"clean": "Empty dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build the sdist and wheel into dist/."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _uv(ctx, "build")


@task(
    help={
        "k": "pytest -k expression.",
        "path": "Test file or directory (defaults to tests).",
        "options": "Extra pytest flags, passed through verbatim.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite."""
    args: list[str] = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    args.extend(shlex.split(options))
    args.append(path)
    _uv(ctx, *args)


@task(help={"fix": "Let ruff apply safe fixes."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with ruff."""
    _uv(ctx, "run", "ruff", "format", "--check", *SOURCE_PATHS)
    check_args: Sequence[str] = ("run", "ruff", "check", *SOURCE_PATHS)
    _uv(ctx, *check_args, *(["--fix"] if fix else []))


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _uv(ctx, "run", "mypy", "src")


@task
def ci(ctx: Context) -> None:
    """Run lint, type checks, and tests in CI order."""
    lint(ctx)
    mypy(ctx)
    tests(ctx)


namespace = Collection(sync, build, tests, lint, mypy, ci)
