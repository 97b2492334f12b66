"""Expiry specifications for cache entries.

An expiry is either a duration relative to the moment of storing
(``RelativeSeconds``) or a fixed point in time (``AbsoluteInstant``).
Both resolve to an aware UTC-comparable ``datetime`` given the current
instant. ``coerce_expiry`` converts loosely typed caller input into one
of the two variants at the API boundary.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Protocol, Union, runtime_checkable

from .errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class RelativeSeconds:
    """Expire ``seconds`` after the instant the entry is stored."""

    seconds: float

    def __post_init__(self) -> None:
        # bool is an int subclass; True/False are never meant as durations
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, (numbers.Real, Decimal)):
            raise InvalidArgumentError(f"seconds must be a number, got {self.seconds!r}")
        try:
            seconds = float(self.seconds)
        except (OverflowError, ValueError) as e:
            raise InvalidArgumentError(f"{self.seconds!r} seconds is out of range") from e
        if not math.isfinite(seconds):
            raise InvalidArgumentError(f"seconds must be finite, got {self.seconds!r}")
        object.__setattr__(self, "seconds", seconds)

    def resolve(self, now: datetime) -> datetime:
        try:
            return now + timedelta(seconds=self.seconds)
        except OverflowError as e:
            raise InvalidArgumentError(f"{self.seconds!r} seconds is out of range") from e


@dataclass(frozen=True, slots=True)
class AbsoluteInstant:
    """Expire at a fixed instant. Naive datetimes are read as local time."""

    at: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.at, datetime):
            raise InvalidArgumentError(f"at must be a datetime, got {self.at!r}")
        if self.at.tzinfo is None:
            object.__setattr__(self, "at", self.at.astimezone(timezone.utc))

    def resolve(self, now: datetime) -> datetime:
        return self.at


Expiry = Union[RelativeSeconds, AbsoluteInstant]


@runtime_checkable
class ExpiryConvertible(Protocol):
    """Anything that knows how to express itself as an expiry."""

    def to_expiry(self) -> Expiry:
        ...


def coerce_expiry(value: Any) -> Expiry:
    """Convert caller input to an ``Expiry``.

    Duration readings are tried before absolute-time readings:
      - Expiry variants pass through.
      - ``ExpiryConvertible`` objects are asked via ``to_expiry()``.
      - ``timedelta`` and real numbers become ``RelativeSeconds``.
      - ``datetime`` becomes ``AbsoluteInstant``.

    Raises InvalidArgumentError for anything else.
    """
    if isinstance(value, (RelativeSeconds, AbsoluteInstant)):
        return value

    if isinstance(value, ExpiryConvertible):
        converted = value.to_expiry()
        if not isinstance(converted, (RelativeSeconds, AbsoluteInstant)):
            raise InvalidArgumentError(
                f"{type(value).__name__}.to_expiry() returned {converted!r}, not an expiry"
            )
        return converted

    if isinstance(value, timedelta):
        return RelativeSeconds(value.total_seconds())

    # bool is an int subclass; True/False are never meant as durations
    if isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool):
        return RelativeSeconds(value)

    if isinstance(value, datetime):
        return AbsoluteInstant(value)

    raise InvalidArgumentError(f"time argument {value!r} could not be converted to a time")
