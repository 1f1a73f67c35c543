"""Configuration management for retidy."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import RetidyConfig
from .resolver import (
    DEFAULT_HISTORY_PATH,
    ENV_PREFIX,
    flatten_for_env,
    history_path_for,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.retidy/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # retidy configuration file
    # Edit by hand or with `retidy config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Read and write the YAML configuration file and apply override precedence."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = False,
        env_overrides: Mapping[str, str] | None = None,
    ) -> RetidyConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-precedence overrides, usually from command flags.
            include_env: Whether `RETIDY__*` environment variables are applied.
            ensure_file: Write a default configuration file first when none exists.
            env_overrides: Explicit environment mapping used instead of ``os.environ``.

        Returns:
            RetidyConfig: Validated configuration model.

        Raises:
            ConfigError: If the file or any override cannot be parsed or validated.
        """
        if ensure_file:
            self.ensure_exists()

        env_values: dict[str, Any] | None = None
        if include_env:
            source = env_overrides if env_overrides is not None else self._env
            env_values = self._extract_env(source) or None

        return resolve_with_precedence(
            defaults=RetidyConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_values,
            cli_overrides=cli_overrides,
        )

    def save(self, config: RetidyConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, RetidyConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self._write_file(RetidyConfig().model_dump(mode="python"))
        return self._config_path

    def set_value(self, key: str, value: Any) -> tuple[str, str]:
        """Store ``value`` at the dotted ``key`` and return the file text before and after.

        The updated document is validated before it is written, so a rejected
        value leaves the file untouched.

        Raises:
            ConfigError: If the key is empty, crosses a non-mapping value, or the
                resulting configuration is invalid.
        """
        self.ensure_exists()
        before = self._config_path.read_text(encoding="utf-8")

        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError("KEY must be a dotted path such as 'history.max_entries'.")

        data = self._read_file()
        node = data
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(f"Cannot assign into '{segment}'; it is not a mapping.")
            node = child
        node[segments[-1]] = value

        resolve_with_precedence(defaults=RetidyConfig(), file_overrides=data)
        self._write_file(data)
        return before, self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def _extract_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX):
                continue
            segments = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
            if not segments:
                continue
            try:
                value: Any = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                value = raw_value
            overrides[".".join(segments)] = value
        return overrides


__all__ = [
    "ConfigManager",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_HISTORY_PATH",
    "RetidyConfig",
    "flatten_for_env",
    "history_path_for",
    "resolve_with_precedence",
]
