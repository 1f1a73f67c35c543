"""Configuration models describing retidy settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RetidyBaseModel(BaseModel):
    """Shared configuration for retidy settings models."""

    model_config = ConfigDict(extra="forbid")


class HistorySettings(RetidyBaseModel):
    """Settings for the operation history journal.

    Attributes:
        path: Optional override for the history file location.
        max_entries: Maximum number of journal entries to keep (0 disables the cap).
        max_age_days: Maximum entry age in days (0 disables the cap).
        auto_prune: Whether recording a new operation prunes the journal first.
    """

    path: Optional[str] = None
    max_entries: int = Field(default=100, ge=0)
    max_age_days: int = Field(default=30, ge=0)
    auto_prune: bool = True


class RenameSettings(RetidyBaseModel):
    """Defaults applied when executing a batch of proposals.

    Attributes:
        create_directories: Whether missing destination folders are created for moves.
        record_history: Whether completed batches are written to the journal.
        check_file_system: Whether `check` consults the disk for existing targets.
    """

    create_directories: bool = True
    record_history: bool = True
    check_file_system: bool = True


class LoggingSettings(RetidyBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(RetidyBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        default_format: Output format used when `--format` is not given.
        quiet_default: Whether commands suppress non-error output by default.
    """

    default_format: Literal["table", "json", "plain"] = "table"
    quiet_default: bool = False


class RetidyConfig(RetidyBaseModel):
    """Top-level configuration struct for retidy.

    Attributes:
        history: Journal location and retention settings.
        rename: Batch execution defaults.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    history: HistorySettings = Field(default_factory=HistorySettings)
    rename: RenameSettings = Field(default_factory=RenameSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "RetidyBaseModel",
    "HistorySettings",
    "RenameSettings",
    "LoggingSettings",
    "CLIOptions",
    "RetidyConfig",
]
