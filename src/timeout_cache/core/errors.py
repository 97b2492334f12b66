from __future__ import annotations


class TimeoutCacheError(Exception):
    """Base error for the timeout cache."""


class InvalidArgumentError(TimeoutCacheError, ValueError):
    """Raised when a timeout or expiry argument is invalid."""


class NotFoundError(TimeoutCacheError, KeyError):
    """Raised when a requested key is not in the cache."""
