"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import RetidyConfig

ENV_PREFIX = "RETIDY__"
DEFAULT_HISTORY_PATH = Path("~/.retidy/history.json")


def resolve_with_precedence(
    *,
    defaults: RetidyConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> RetidyConfig:
    """Layer override sources on top of defaults and validate the result.

    Later sources win: defaults < file < environment < CLI. Keys may be nested
    mappings or dotted paths such as ``history.max_entries``.

    Raises:
        ConfigError: If a source is malformed or the merged values are invalid.
    """
    merged: dict[str, Any] = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for label, layer in layers:
        if layer is None:
            continue
        merged = _merge(merged, _expand(layer, label))

    try:
        return RetidyConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: RetidyConfig) -> Dict[str, str]:
    """Render the config as `RETIDY__SECTION__KEY` environment variable mappings."""
    flat: Dict[str, str] = {}
    for path, value in _leaves(config.model_dump(mode="python"), []):
        key = ENV_PREFIX + "__".join(part.upper() for part in path)
        if value is None:
            flat[key] = "null"
        elif isinstance(value, list):
            flat[key] = yaml.safe_dump(value, default_flow_style=True).strip()
        else:
            flat[key] = str(value)
    return flat


def history_path_for(config: RetidyConfig) -> Path:
    """Return the journal location configured for ``config``."""
    raw = config.history.path
    return (Path(raw) if raw else DEFAULT_HISTORY_PATH).expanduser()


def _leaves(node: Any, prefix: list[str]) -> Iterator[tuple[list[str], Any]]:
    if isinstance(node, dict):
        for key, child in node.items():
            yield from _leaves(child, [*prefix, str(key)])
    else:
        yield prefix, node


def _expand(source: Mapping[str, Any], label: str) -> dict[str, Any]:
    """Turn dotted keys into nested dictionaries."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{label.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{label.capitalize()} override keys must be strings.")
        *parents, leaf = key.split(".")
        node = expanded
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{label.capitalize()} override for {key} conflicts with existing value."
                )
            node = child
        if isinstance(value, MappingABC):
            previous = node.get(leaf)
            nested = _expand(value, label)
            node[leaf] = _merge(previous, nested) if isinstance(previous, dict) else nested
        else:
            node[leaf] = value
    return expanded


def _merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    result = deepcopy(dict(base))
    for key, value in overrides.items():
        current = result.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            result[key] = _merge(current, value)
        else:
            result[key] = deepcopy(value)
    return result


__all__ = [
    "DEFAULT_HISTORY_PATH",
    "ENV_PREFIX",
    "flatten_for_env",
    "history_path_for",
    "resolve_with_precedence",
]
