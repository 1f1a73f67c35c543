"""Operation history journal: recording, pruning, querying, undo, and restore."""

from .errors import (
    EmptyHistoryError,
    HistoryError,
    HistoryStoreError,
    OperationAlreadyUndoneError,
    OperationNotFoundError,
)
from .lookup import (
    get_original_path,
    has_file_been_renamed,
    lookup_file_history,
    lookup_multiple_files,
)
from .models import (
    HISTORY_STORE_VERSION,
    FileHistoryLookup,
    FileHistoryRecord,
    FileOperationEntry,
    HistoryStore,
    OperationHistoryEntry,
    OperationSummary,
    OperationType,
    PruneConfig,
    RestoreOptions,
    RestoreResult,
    UndoFileResult,
    UndoOptions,
    UndoResult,
)
from .pruner import DEFAULT_PRUNE_CONFIG, prune_history, prune_repository, should_prune
from .query import get_history, get_history_count, get_history_entry
from .recorder import create_entry_from_result, determine_operation_type, record_operation
from .restore import restore_file
from .storage import HistoryRepository
from .undo import cleanup_directories, is_operation_undone, mark_operation_as_undone, undo_operation

__all__ = [
    "DEFAULT_PRUNE_CONFIG",
    "HISTORY_STORE_VERSION",
    "EmptyHistoryError",
    "FileHistoryLookup",
    "FileHistoryRecord",
    "FileOperationEntry",
    "HistoryError",
    "HistoryRepository",
    "HistoryStore",
    "HistoryStoreError",
    "OperationAlreadyUndoneError",
    "OperationHistoryEntry",
    "OperationNotFoundError",
    "OperationSummary",
    "OperationType",
    "PruneConfig",
    "RestoreOptions",
    "RestoreResult",
    "UndoFileResult",
    "UndoOptions",
    "UndoResult",
    "cleanup_directories",
    "create_entry_from_result",
    "determine_operation_type",
    "get_history",
    "get_history_count",
    "get_history_entry",
    "get_original_path",
    "has_file_been_renamed",
    "is_operation_undone",
    "lookup_file_history",
    "lookup_multiple_files",
    "mark_operation_as_undone",
    "prune_history",
    "prune_repository",
    "record_operation",
    "restore_file",
    "should_prune",
    "undo_operation",
]
