class SplitMacrosException(Exception):
    """Base class for exceptions raised by split_macros."""


class StoreUnavailableError(SplitMacrosException):
    """Raised when the backing key-value store cannot be reached.

    Retryable. Callers must not treat this as an empty result.

    Attributes:
        message: Human-readable error description.
        cause: Optional underlying exception that caused this error.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class RebuildTimeoutError(SplitMacrosException):
    """Raised when an on-demand rebuild exceeds its caller-supplied timeout."""

    def __init__(self, key: str, timeout: float) -> None:
        self.key = key
        self.timeout = timeout
        super().__init__(f"Rebuild of {key} exceeded {timeout:.2f}s")


class RecordFormatError(SplitMacrosException):
    """Raised when a raw game record cannot be decoded."""


class PathSyntaxError(SplitMacrosException):
    """Raised when a split path is not a valid dimension/value sequence."""


class MacroFormatError(SplitMacrosException):
    """Raised when a stored macro value cannot be decoded into a tree."""
