"""In-memory key-value store whose entries expire at a fixed instant.

Expired entries are treated as absent and removed lazily: ``get``,
``size`` and ``empty`` prune the whole store when they run into an
expired entry, and ``prune`` can be called directly. There is no
background reaper and no thread safety; callers sharing a cache across
threads must lock around it.

    cache = TimeoutCache()
    cache["foo"] = "bar"
    cache.get("foo")   # "bar"
    # ... 60 seconds later
    cache.get("foo")   # None
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generic, Hashable, Iterator, Optional, TypeVar, Union

import structlog

from .errors import InvalidArgumentError, NotFoundError
from .expiry import AbsoluteInstant, Expiry, RelativeSeconds, coerce_expiry

T = TypeVar("T")

logger = structlog.wrap_logger(logging.getLogger(__name__))

# Default number of seconds an entry stays alive
DEFAULT_TIMEOUT = 60


def _now() -> datetime:
    # Wall clock, so absolute expiry instants given by callers line up with it
    return datetime.fromtimestamp(time.time(), tz=timezone.utc)


def _coerce_timeout(timeout: Union[int, float, timedelta]) -> int:
    if isinstance(timeout, timedelta):
        return int(timeout.total_seconds())
    if isinstance(timeout, (bool, str, bytes)):
        raise InvalidArgumentError(f"timeout {timeout!r} could not be converted to seconds")
    try:
        return int(timeout)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidArgumentError(f"timeout {timeout!r} could not be converted to seconds") from e


@dataclass(frozen=True, slots=True)
class TimedEntry(Generic[T]):
    # Stored value + absolute expiration instant (never mutated)
    value: T
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class TimeoutCache(Generic[T]):
    """Key-value store where every entry carries an expiration instant.

    ``timeout`` is the default lifetime in seconds for entries stored
    without an explicit expiry. It is converted with ``int()`` (a
    ``timedelta`` contributes its whole seconds) and must be > 0.
    """

    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(self, timeout: Union[int, float, timedelta] = DEFAULT_TIMEOUT) -> None:
        seconds = _coerce_timeout(timeout)
        if seconds <= 0:
            raise InvalidArgumentError("Timeout must be > 0")
        # Every default-form set must be able to represent now + timeout
        RelativeSeconds(seconds).resolve(_now())

        self._timeout = seconds
        # Plain dict: O(1) lookups, at the cost of a full scan on prune
        self._store: Dict[Hashable, TimedEntry[T]] = {}
        logger.debug("cache_created", timeout=seconds)

    @property
    def timeout(self) -> int:
        return self._timeout

    def _lookup(self, key: Hashable) -> Optional[TimedEntry[T]]:
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.expired(_now()):
            self.prune()
            return None

        return entry

    def get(self, key: Hashable, default: Any = None) -> Union[T, Any]:
        """Return the live value for ``key``, or ``default``.

        Finding an expired entry prunes the whole cache.
        """
        entry = self._lookup(key)
        return default if entry is None else entry.value

    def __getitem__(self, key: Hashable) -> T:
        entry = self._lookup(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __contains__(self, key: object) -> bool:
        return self._lookup(key) is not None  # type: ignore[arg-type]

    def expire_time(self, key: Hashable) -> datetime:
        """Return the expiration instant stored for ``key``.

        Raises NotFoundError if the key is not in the cache. An entry that has
        expired but not yet been pruned still reports its instant.
        """
        entry = self._store.get(key)
        if entry is None:
            raise NotFoundError(key)
        return entry.expires_at

    def __setitem__(self, key: Hashable, value: T) -> None:
        self._store[key] = TimedEntry(value=value, expires_at=RelativeSeconds(self._timeout).resolve(_now()))

    def set(
        self,
        key: Hashable,
        value: T,
        expires: Any = None,
        *,
        expire_in: Optional[float] = None,
        expire_at: Optional[datetime] = None,
    ) -> Optional[T]:
        """Store ``value`` under ``key`` with an expiry.

        The expiry is taken from exactly one of:
          - expires: anything ``coerce_expiry`` accepts (seconds, timedelta,
            datetime, an Expiry variant or an ExpiryConvertible).
          - expire_in: seconds from now.
          - expire_at: absolute datetime.
        With none given, the cache's default timeout applies.

        Returns the stored value. If the resolved instant is not in the
        future nothing is stored (an existing entry is left as is) and
        None is returned.
        """
        expiry = self._select_expiry(expires, expire_in, expire_at)

        now = _now()
        expires_at = expiry.resolve(now)
        if expires_at <= now:
            logger.debug("cache_set_skipped", key=key, expires_at=expires_at)
            return None

        self._store[key] = TimedEntry(value=value, expires_at=expires_at)
        return value

    def _select_expiry(
        self,
        expires: Any,
        expire_in: Optional[float],
        expire_at: Optional[datetime],
    ) -> Expiry:
        given = [opt for opt in (expires, expire_in, expire_at) if opt is not None]
        if len(given) > 1:
            raise InvalidArgumentError("Pass only one of expires, expire_in, expire_at")

        if expire_in is not None:
            return RelativeSeconds(expire_in)
        if expire_at is not None:
            return AbsoluteInstant(expire_at)
        if expires is not None:
            return coerce_expiry(expires)
        return RelativeSeconds(self._timeout)

    def delete(self, key: Hashable) -> Optional[T]:
        """Remove ``key`` whether or not it expired. Returns its value or None."""
        entry = self._store.pop(key, None)
        return None if entry is None else entry.value

    def __delitem__(self, key: Hashable) -> None:
        if key not in self._store:
            raise KeyError(key)
        del self._store[key]

    def size(self) -> int:
        self.prune()
        return len(self._store)

    def __len__(self) -> int:
        return self.size()

    def empty(self) -> bool:
        self.prune()
        return not self._store

    def __iter__(self) -> Iterator[Hashable]:
        # Snapshot of live keys; the store may change while the caller iterates
        self.prune()
        return iter(list(self._store))

    def clear(self) -> None:
        self._store.clear()

    def prune(self) -> Optional[int]:
        """Remove every expired entry.

        Returns the number of entries removed, or None if the cache was
        empty or nothing had expired.
        """
        if not self._store:
            return None

        # One instant for the whole pass
        now = _now()
        expired_keys = [k for k, entry in self._store.items() if entry.expired(now)]
        for k in expired_keys:
            del self._store[k]

        if not expired_keys:
            return None

        logger.debug("cache_pruned", removed=len(expired_keys), remaining=len(self._store))
        return len(expired_keys)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._store!r}>"
