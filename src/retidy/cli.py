"""Command line interface for retidy."""

from __future__ import annotations

import difflib
import logging
import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, cast

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from retidy.config import (
    ConfigError,
    ConfigManager,
    RetidyConfig,
    history_path_for,
)
from retidy.history import (
    EmptyHistoryError,
    HistoryError,
    HistoryRepository,
    HistoryStoreError,
    OperationAlreadyUndoneError,
    OperationHistoryEntry,
    OperationNotFoundError,
    OperationType,
    PruneConfig,
    RestoreOptions,
    UndoOptions,
    get_history,
    get_history_entry,
    lookup_file_history,
    prune_repository,
    restore_file,
    undo_operation,
)
from retidy.rename import (
    BatchExecutionError,
    BatchRenameResult,
    BatchValidationError,
    CancellationToken,
    ExecuteRenameOptions,
    RenameError,
    ValidationResult,
    detect_batch_issues,
    execute_batch_rename,
    load_proposals,
    summarize_issues,
    validate_batch_rename,
)

console = Console()
LOGGER = logging.getLogger(__name__)

OUTPUT_FORMATS = ("table", "json", "plain")
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2

_ERROR_CODES: dict[type[Exception], str] = {
    BatchValidationError: "validation_error",
    RenameError: "rename_error",
    OperationNotFoundError: "not_found",
    OperationAlreadyUndoneError: "already_undone",
    EmptyHistoryError: "empty_history",
    HistoryStoreError: "history_store_error",
    HistoryError: "history_error",
    ConfigError: "config_error",
}

format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format; defaults to cli.default_format from the configuration.",
)
quiet_option = click.option("--quiet", is_flag=True, help="Suppress non-error output.")


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Whether JSON output is active.
        details: Optional structured details for the JSON payload.
        original: Exception to chain when not using JSON.

    Raises:
        SystemExit: In JSON mode, after printing the error payload.
        click.ClickException: Otherwise.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(EXIT_ERROR)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _handle_domain_error(exc: Exception, *, json_output: bool) -> None:
    code = next(
        (label for kind, label in _ERROR_CODES.items() if isinstance(exc, kind)), "error"
    )
    details = None
    if isinstance(exc, BatchValidationError):
        details = [issue.to_payload() for issue in exc.validation.errors]
        if not json_output:
            _emit_message(_validation_table(exc.validation), quiet=False, mode="error")
    elif isinstance(exc, BatchExecutionError) and exc.result is not None:
        details = exc.result.to_payload()
    _handle_cli_error(str(exc), code=code, json_output=json_output, details=details, original=exc)


def _emit_message(message: Any, *, quiet: bool, mode: str = "detail") -> None:
    """Print ``message`` unless quiet mode hides it; errors are always shown."""
    if quiet and mode != "error":
        return
    console.print(message)


def _format_summary_line(command: str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary: {parts}.[/green]"


def _load_settings(
    ctx: click.Context, output_format: Optional[str], quiet: bool
) -> tuple[RetidyConfig, str, bool]:
    """Load configuration and resolve the output format and quiet mode.

    Raises:
        ConfigError: If the configuration cannot be loaded.
        click.ClickException: If JSON output is combined with --quiet.
    """
    config = ConfigManager().load()
    _configure_logging(config)

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    fmt = output_format or config.cli.default_format
    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    if fmt == "json":
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--format json cannot be combined with --quiet.")
        quiet_enabled = False
    return config, fmt, quiet_enabled


def _configure_logging(config: RetidyConfig) -> None:
    level = logging.getLevelName(config.logging.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _repository_for(config: RetidyConfig) -> HistoryRepository:
    prune_config = None
    if config.history.auto_prune:
        prune_config = PruneConfig(
            max_entries=config.history.max_entries,
            max_age_days=config.history.max_age_days,
        )
    return HistoryRepository(history_path_for(config), prune_config=prune_config)


@contextmanager
def _cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Turn Ctrl+C into a cooperative cancellation while a batch runs."""
    installed = False
    previous: Any = None
    try:
        previous = signal.signal(signal.SIGINT, lambda _signum, _frame: token.cancel())
        installed = True
    except ValueError:
        # Handlers can only be installed from the main thread.
        LOGGER.debug("Ctrl+C cancellation unavailable outside the main thread")
    try:
        yield
    finally:
        if installed:
            signal.signal(signal.SIGINT, previous)


def _batch_exit_code(succeeded: int, failed: int) -> int:
    if not failed:
        return EXIT_OK
    return EXIT_PARTIAL if succeeded else EXIT_ERROR


def _validation_table(validation: ValidationResult) -> Table:
    table = Table(title="Validation errors", show_lines=False)
    table.add_column("Code", style="red")
    table.add_column("File")
    table.add_column("Message")
    for issue in validation.errors:
        table.add_row(issue.code, issue.file_path, issue.message)
    return table


def _render_batch(result: BatchRenameResult, fmt: str, quiet: bool) -> None:
    if fmt == "json":
        console.print_json(data=result.to_payload())
        return

    if fmt == "table":
        table = Table(title="Rename results")
        table.add_column("Outcome")
        table.add_column("Original")
        table.add_column("New / reason")
        styles = {"success": "green", "skipped": "yellow", "failed": "red"}
        for item in result.results:
            detail = item.new_path if item.outcome == "success" else item.error or ""
            table.add_row(
                f"[{styles[item.outcome]}]{item.outcome}[/{styles[item.outcome]}]",
                item.original_path,
                detail,
            )
        _emit_message(table, quiet=quiet)
    else:
        for item in result.results:
            detail = item.new_path if item.outcome == "success" else item.error
            _emit_message(f"{item.outcome}\t{item.original_path}\t{detail}", quiet=quiet)

    summary = result.summary
    metrics: dict[str, Any] = {
        "succeeded": summary.succeeded,
        "skipped": summary.skipped,
        "failed": summary.failed,
        "directories_created": summary.directories_created,
    }
    if result.aborted:
        metrics["aborted"] = True
    if result.history_entry_id:
        metrics["history_id"] = result.history_entry_id
    _emit_message(_format_summary_line("Apply", metrics), quiet=quiet, mode="summary")


def _history_table(entries: list[OperationHistoryEntry]) -> Table:
    table = Table(title="Operation history (newest first)")
    table.add_column("ID")
    table.add_column("Timestamp")
    table.add_column("Type")
    table.add_column("Files", justify="right")
    table.add_column("Succeeded", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Undone")
    for entry in entries:
        table.add_row(
            entry.id,
            entry.timestamp.isoformat(),
            entry.operation_type,
            str(entry.file_count),
            str(entry.summary.succeeded),
            str(entry.summary.failed),
            entry.undone_at.isoformat() if entry.undone_at else "",
        )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="retidy")
def cli() -> None:
    """Apply batches of file renames and undo them from a journal."""


@cli.command()
@click.argument("proposals", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--no-create-dirs", is_flag=True, help="Do not create missing destination folders.")
@click.option("--no-history", is_flag=True, help="Do not record the batch in the journal.")
@click.option("--skip-validation", is_flag=True, help="Skip pre-flight validation.")
@format_option
@quiet_option
@click.pass_context
def apply(
    ctx: click.Context,
    proposals: Path,
    no_create_dirs: bool,
    no_history: bool,
    skip_validation: bool,
    output_format: Optional[str],
    quiet: bool,
) -> None:
    """Execute the rename proposals stored in the JSON file PROPOSALS.

    Exits with 0 when every file succeeded or was skipped, 2 when only some
    files failed, and 1 when nothing could be renamed or an error occurred.
    """
    json_enabled = output_format == "json"
    try:
        config, fmt, quiet_enabled = _load_settings(ctx, output_format, quiet)
        json_enabled = fmt == "json"

        batch = load_proposals(proposals)
        token = CancellationToken()
        options = ExecuteRenameOptions(
            cancel_token=token,
            skip_validation=skip_validation,
            create_directories=config.rename.create_directories and not no_create_dirs,
            record_history=config.rename.record_history and not no_history,
        )
        with _cancel_on_interrupt(token):
            result = execute_batch_rename(batch, options, repository=_repository_for(config))

        _render_batch(result, fmt, quiet_enabled)
        code = _batch_exit_code(result.summary.succeeded, result.summary.failed)
        if code != EXIT_OK:
            raise SystemExit(code)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except (ConfigError, RenameError, HistoryError) as exc:
        _handle_domain_error(exc, json_output=json_enabled)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while applying renames: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("proposals", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--check-fs/--no-check-fs",
    "check_fs",
    default=None,
    help="Report destinations that already exist on disk.",
)
@format_option
@quiet_option
@click.pass_context
def check(
    ctx: click.Context,
    proposals: Path,
    check_fs: Optional[bool],
    output_format: Optional[str],
    quiet: bool,
) -> None:
    """Report conflicts and validation problems for PROPOSALS without renaming anything.

    Exits with 1 when any proposal is blocked.
    """
    json_enabled = output_format == "json"
    try:
        config, fmt, quiet_enabled = _load_settings(ctx, output_format, quiet)
        json_enabled = fmt == "json"

        batch = load_proposals(proposals)
        check_file_system = config.rename.check_file_system if check_fs is None else check_fs
        reports = detect_batch_issues(batch, check_file_system=check_file_system)
        validation = validate_batch_rename(
            [proposal for proposal in batch if proposal.is_actionable],
            create_directories=config.rename.create_directories,
        )
        counts = summarize_issues(reports)
        blocked = counts["blocked"] > 0 or not validation.valid

        if fmt == "json":
            console.print_json(
                data={
                    "reports": [report.to_payload() for report in reports],
                    "validation": validation.to_payload(),
                    "summary": counts,
                }
            )
        else:
            flagged = [report for report in reports if report.issues]
            if fmt == "table" and flagged:
                table = Table(title="Detected issues")
                table.add_column("File")
                table.add_column("Severity")
                table.add_column("Code")
                table.add_column("Message")
                table.add_column("Suggested name")
                for report in flagged:
                    for issue in report.issues:
                        table.add_row(
                            report.file_path,
                            issue.severity,
                            issue.code,
                            issue.message,
                            issue.fixed_name or "",
                        )
                _emit_message(table, quiet=quiet_enabled)
            elif fmt == "plain":
                for report in flagged:
                    for issue in report.issues:
                        _emit_message(
                            f"{issue.severity}\t{issue.code}\t{report.file_path}\t{issue.message}",
                            quiet=quiet_enabled,
                        )
            if not validation.valid:
                _emit_message(_validation_table(validation), quiet=quiet_enabled, mode="warning")
            _emit_message(
                _format_summary_line(
                    "Check",
                    {
                        "proposals": len(reports),
                        "blocked": counts["blocked"],
                        "validation_errors": len(validation.errors),
                    },
                ),
                quiet=quiet_enabled,
                mode="summary",
            )

        if blocked:
            raise SystemExit(EXIT_ERROR)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except (ConfigError, RenameError, HistoryError) as exc:
        _handle_domain_error(exc, json_output=json_enabled)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while checking proposals: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("operation_id", required=False)
@click.option("--limit", type=click.IntRange(min=1), help="Show at most this many entries.")
@click.option(
    "--type",
    "operation_type",
    type=click.Choice(["rename", "move", "organize"]),
    help="Only show entries of this type.",
)
@format_option
@quiet_option
@click.pass_context
def history(
    ctx: click.Context,
    operation_id: Optional[str],
    limit: Optional[int],
    operation_type: Optional[str],
    output_format: Optional[str],
    quiet: bool,
) -> None:
    """List recorded operations, or show the files of OPERATION_ID."""
    json_enabled = output_format == "json"
    try:
        config, fmt, quiet_enabled = _load_settings(ctx, output_format, quiet)
        json_enabled = fmt == "json"
        repository = _repository_for(config)

        if operation_id:
            entry = get_history_entry(repository, operation_id)
            if entry is None:
                raise OperationNotFoundError(f"Operation not found: {operation_id}")
            if fmt == "json":
                console.print_json(data=entry.to_payload())
                return
            _emit_message(_history_table([entry]), quiet=quiet_enabled)
            files = Table(title="Files")
            files.add_column("Status")
            files.add_column("Original")
            files.add_column("New")
            for record in entry.files:
                files.add_row(
                    "ok" if record.success else "failed",
                    record.original_path,
                    record.new_path or record.error or "",
                )
            _emit_message(files, quiet=quiet_enabled)
            return

        entries = get_history(
            repository,
            limit=limit,
            operation_type=cast(Optional[OperationType], operation_type),
        )
        if fmt == "json":
            console.print_json(data=[entry.to_payload() for entry in entries])
            return
        if not entries:
            _emit_message("[yellow]No operations recorded.[/yellow]", quiet=quiet_enabled)
            return
        if fmt == "plain":
            for entry in entries:
                undone = " undone" if entry.is_undone else ""
                _emit_message(
                    f"{entry.id}\t{entry.timestamp.isoformat()}\t{entry.operation_type}"
                    f"\t{entry.file_count}{undone}",
                    quiet=quiet_enabled,
                )
            return
        _emit_message(_history_table(entries), quiet=quiet_enabled)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except (ConfigError, RenameError, HistoryError) as exc:
        _handle_domain_error(exc, json_output=json_enabled)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while reading history: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("operation_id", required=False)
@click.option("--dry-run", is_flag=True, help="Check every file without moving anything.")
@click.option("--force", is_flag=True, help="Restore what can be restored even if some files fail.")
@format_option
@quiet_option
@click.pass_context
def undo(
    ctx: click.Context,
    operation_id: Optional[str],
    dry_run: bool,
    force: bool,
    output_format: Optional[str],
    quiet: bool,
) -> None:
    """Undo OPERATION_ID, or the most recent operation that is not undone yet."""
    json_enabled = output_format == "json"
    try:
        config, fmt, quiet_enabled = _load_settings(ctx, output_format, quiet)
        json_enabled = fmt == "json"

        result = undo_operation(
            operation_id,
            UndoOptions(dry_run=dry_run, force=force),
            repository=_repository_for(config),
        )
        blocked = result.dry_run and not dry_run

        if fmt == "json":
            console.print_json(data=result.to_payload())
        else:
            table = Table(title=f"Undo {result.operation_id}" + (" (preview)" if result.dry_run else ""))
            table.add_column("Status")
            table.add_column("Original")
            table.add_column("Current")
            table.add_column("Reason")
            for item in result.files:
                if item.success:
                    status = "[green]restored[/green]" if not result.dry_run else "ready"
                elif item.skip_reason:
                    status = "[yellow]skipped[/yellow]"
                else:
                    status = "[red]failed[/red]"
                table.add_row(
                    status,
                    item.original_path,
                    item.current_path or "",
                    item.error or item.skip_reason or "",
                )
            if fmt == "table":
                _emit_message(table, quiet=quiet_enabled)
            else:
                for item in result.files:
                    reason = item.error or item.skip_reason or ""
                    _emit_message(
                        f"{'ok' if item.success else 'no'}\t{item.original_path}\t{reason}",
                        quiet=quiet_enabled,
                    )
            if blocked:
                _emit_message(
                    f"[red]Undo blocked: {result.files_failed} file(s) cannot be restored. "
                    "Nothing was moved; re-run with --force to restore the rest.[/red]",
                    quiet=quiet_enabled,
                    mode="error",
                )
            _emit_message(
                _format_summary_line(
                    "Undo",
                    {
                        "dry_run": result.dry_run,
                        "restored": result.files_restored,
                        "skipped": result.files_skipped,
                        "failed": result.files_failed,
                        "directories_removed": len(result.directories_removed),
                    },
                ),
                quiet=quiet_enabled,
                mode="summary",
            )

        if blocked:
            raise SystemExit(EXIT_ERROR)
        if not dry_run and not result.success:
            raise SystemExit(EXIT_PARTIAL if result.files_restored else EXIT_ERROR)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except (ConfigError, RenameError, HistoryError) as exc:
        _handle_domain_error(exc, json_output=json_enabled)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while undoing: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--operation", "operation_id", help="Undo this whole operation instead.")
@click.option("--lookup", "lookup_only", is_flag=True, help="Only show the file's rename history.")
@click.option("--dry-run", is_flag=True, help="Check the restore without moving anything.")
@format_option
@quiet_option
@click.pass_context
def restore(
    ctx: click.Context,
    path: Optional[Path],
    operation_id: Optional[str],
    lookup_only: bool,
    dry_run: bool,
    output_format: Optional[str],
    quiet: bool,
) -> None:
    """Move the file at PATH back to where it was before any recorded rename."""
    json_enabled = output_format == "json"
    try:
        config, fmt, quiet_enabled = _load_settings(ctx, output_format, quiet)
        json_enabled = fmt == "json"
        if path is None and not operation_id:
            raise click.UsageError("PATH is required unless --operation is given.")
        repository = _repository_for(config)

        if lookup_only and path is not None:
            lookup = lookup_file_history(path, repository=repository)
            if fmt == "json":
                console.print_json(data=lookup.to_payload())
            elif not lookup.found:
                _emit_message(f"[yellow]No history found for {lookup.searched_path}.[/yellow]", quiet=quiet_enabled)
            else:
                _emit_message(f"Original: {lookup.original_path}", quiet=quiet_enabled)
                _emit_message(f"Current: {lookup.current_path}", quiet=quiet_enabled)
                _emit_message(f"At original: {lookup.is_at_original}", quiet=quiet_enabled)
                for operation in lookup.operations:
                    _emit_message(
                        f"  - [{operation.timestamp.isoformat()}] {operation.operation_type} "
                        f"{operation.original_path} -> {operation.new_path}",
                        quiet=quiet_enabled,
                    )
            if not lookup.found:
                raise SystemExit(EXIT_ERROR)
            return

        result = restore_file(
            path,
            RestoreOptions(dry_run=dry_run, operation_id=operation_id),
            repository=repository,
        )
        if fmt == "json":
            console.print_json(data=result.to_payload())
        elif result.success:
            prefix = "Would restore" if result.dry_run else "Restored"
            if result.message and not result.dry_run:
                _emit_message(f"[green]{result.message}[/green]", quiet=quiet_enabled)
            else:
                _emit_message(
                    f"[green]{prefix} {result.previous_path} -> {result.original_path}[/green]",
                    quiet=quiet_enabled,
                )
        else:
            _emit_message(f"[red]{result.error}[/red]", quiet=quiet_enabled, mode="error")

        if not result.success:
            raise SystemExit(EXIT_ERROR)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except (ConfigError, RenameError, HistoryError) as exc:
        _handle_domain_error(exc, json_output=json_enabled)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while restoring: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.option("--max-entries", type=click.IntRange(min=0), help="Keep at most this many entries.")
@click.option("--max-age-days", type=click.IntRange(min=0), help="Drop entries older than this.")
@quiet_option
@click.pass_context
def prune(
    ctx: click.Context,
    max_entries: Optional[int],
    max_age_days: Optional[int],
    quiet: bool,
) -> None:
    """Remove old journal entries using the configured or given limits."""
    try:
        config, _, quiet_enabled = _load_settings(ctx, None, quiet)
        limits = PruneConfig(
            max_entries=config.history.max_entries if max_entries is None else max_entries,
            max_age_days=config.history.max_age_days if max_age_days is None else max_age_days,
        )
        removed = prune_repository(HistoryRepository(history_path_for(config)), limits)
    except (ConfigError, HistoryError) as exc:
        raise click.ClickException(str(exc)) from exc

    _emit_message(
        _format_summary_line(
            "Prune",
            {
                "removed": removed,
                "max_entries": limits.max_entries,
                "max_age_days": limits.max_age_days,
            },
        ),
        quiet=quiet_enabled,
        mode="summary",
    )


@cli.group()
def config() -> None:
    """Manage the retidy configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env, ensure_file=True)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML literal to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value at the dotted KEY, e.g. history.max_entries.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        before, after = ConfigManager().set_value(key, parsed_value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    changed = [
        line
        for line in difflib.unified_diff(
            before.splitlines(),
            after.splitlines(),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if "# Last updated:" not in line
    ]
    if not any(line.startswith(("+", "-")) and not line.startswith(("+++", "---")) for line in changed):
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(changed), "diff", word_wrap=False))
    console.print(f"[green]Updated {key.strip()}.[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
