"""Exception types raised by the query session."""

from typing import Optional


class TftQueryError(Exception):
    """Base exception for every error raised by tftquery."""
    pass


class PayloadError(TftQueryError):
    """Raised before any I/O when a required payload field is missing or malformed."""

    def __init__(self, field: str, operation: str, expected: str = "<String>"):
        self.field = field
        self.operation = operation
        super().__init__(
            f"The request {operation} requires: {expected} {field}, in the payload."
        )


class FetchError(TftQueryError):
    """Raised when the underlying API call of an operation failed."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")

    @property
    def status(self) -> Optional[int]:
        return getattr(self.cause, "status", None)


class CacheError(TftQueryError):
    """Raised by cache backends when the store is unreachable or rejects an operation."""
    pass


class CacheNotConfiguredError(TftQueryError):
    """Raised when a cache-only operation runs on a session without a cache."""

    def __init__(self, operation: str = "flush_cache"):
        self.operation = operation
        super().__init__(
            f"Cache is not enabled for {operation}. Please enable it in the "
            f"constructor (use_cache=True) or call enable_cache(cache_config)."
        )
