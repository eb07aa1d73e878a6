"""Custom exceptions for clearer error handling across idxwatch."""


class IdxWatchError(Exception):
    """Base exception for all app-specific errors."""


class ConfigError(IdxWatchError):
    """Raised when the configuration file is invalid."""


class FetchError(IdxWatchError):
    """Raised when a quote or holiday list cannot be retrieved or parsed."""


class NotFoundError(FetchError):
    """Raised when a symbol yields no parsable price."""


class MalformedDateError(IdxWatchError, ValueError):
    """Raised when a single holiday entry does not resolve to a date."""


class CalendarError(IdxWatchError):
    """Raised when no trading day can be found in the search window."""
