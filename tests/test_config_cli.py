"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from retidy.cli import cli
from retidy.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".retidy" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "view"], env=env)

    assert result.exit_code == 0
    assert "history:" in result.output
    assert "max_entries" in result.output
    assert _config_path(tmp_path).exists()


def test_config_view_applies_environment_unless_disabled(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    env["RETIDY__HISTORY__MAX_ENTRIES"] = "777"

    with_env = runner.invoke(cli, ["config", "view"], env=env)
    without_env = runner.invoke(cli, ["config", "view", "--no-env"], env=env)

    assert "777" in with_env.output
    assert "777" not in without_env.output


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "history.max_entries", "--value", "42"], env=env)

    assert result.exit_code == 0
    assert "42" in result.output
    assert "Updated history.max_entries." in result.output

    manager = ConfigManager(config_path=_config_path(tmp_path))
    config = manager.load(include_env=False)
    assert config.history.max_entries == 42

    repeat = runner.invoke(cli, ["config", "set", "history.max_entries", "--value", "42"], env=env)
    assert repeat.exit_code == 0
    assert "No changes applied" in repeat.output


def test_config_set_rejects_invalid_values(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "cli.default_format", "--value", "xml"], env=env
    )

    assert result.exit_code != 0
    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.cli.default_format == "table"
