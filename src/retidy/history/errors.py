"""History journal errors."""


class HistoryError(Exception):
    """Base exception for history journal operations."""


class HistoryStoreError(HistoryError):
    """Raised when the history file cannot be read or written."""


class OperationNotFoundError(HistoryError):
    """Raised when no journal entry has the requested id."""


class OperationAlreadyUndoneError(HistoryError):
    """Raised when undoing an entry that is already marked undone."""


class EmptyHistoryError(HistoryError):
    """Raised when there is no operation left to undo."""
