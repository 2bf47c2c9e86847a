"""Custom exceptions for ClipHistory."""

from typing import Optional


class ClipHistoryError(Exception):
    """Base exception class for ClipHistory."""

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {self.original_error})"
        return base_msg


class ConfigurationError(ClipHistoryError):
    """Invalid configuration value."""


class ClipboardError(ClipHistoryError):
    """Base class for clipboard access errors."""


class ClipboardUnavailable(ClipboardError):
    """The clipboard holds no text content right now."""


class ClipboardInitFailure(ClipboardError):
    """The platform clipboard could not be opened at all."""


class ClipboardWriteFailure(ClipboardError):
    """Setting the system clipboard failed."""


class StoreError(ClipHistoryError):
    """Base class for history store errors."""


class StoreOpenFailure(StoreError):
    """The history database could not be opened or created."""


class StoreWriteFailure(StoreError):
    """An upsert or delete did not commit."""


class StoreQueryFailure(StoreError):
    """A listing or search query failed."""


class ResolverFailure(ClipHistoryError):
    """The foreground application name could not be determined."""
