"""Minimal in-memory key-value store with expiring entries."""

from .core.cache import DEFAULT_TIMEOUT, TimedEntry, TimeoutCache
from .core.errors import InvalidArgumentError, NotFoundError, TimeoutCacheError
from .core.expiry import AbsoluteInstant, Expiry, ExpiryConvertible, RelativeSeconds, coerce_expiry

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_TIMEOUT",
    "AbsoluteInstant",
    "Expiry",
    "ExpiryConvertible",
    "InvalidArgumentError",
    "NotFoundError",
    "RelativeSeconds",
    "TimedEntry",
    "TimeoutCache",
    "TimeoutCacheError",
    "coerce_expiry",
]
