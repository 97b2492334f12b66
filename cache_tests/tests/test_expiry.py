from datetime import datetime, timedelta, timezone
from decimal import Decimal
from fractions import Fraction

import pytest

from timeout_cache.core.errors import InvalidArgumentError
from timeout_cache.core.expiry import AbsoluteInstant, RelativeSeconds, coerce_expiry

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class InMinutes:
    def __init__(self, minutes: int) -> None:
        self.minutes = minutes

    def to_expiry(self):
        return RelativeSeconds(self.minutes * 60)


class Broken:
    def to_expiry(self):
        return 42


def test_relative_seconds_resolves_from_now():
    assert RelativeSeconds(10).resolve(NOW) == NOW + timedelta(seconds=10)
    assert RelativeSeconds(-1).resolve(NOW) == NOW - timedelta(seconds=1)


def test_relative_seconds_rejects_non_finite():
    with pytest.raises(InvalidArgumentError):
        RelativeSeconds(float("nan"))
    with pytest.raises(InvalidArgumentError):
        RelativeSeconds(float("inf"))


def test_relative_seconds_out_of_range():
    with pytest.raises(InvalidArgumentError):
        RelativeSeconds(1e18).resolve(NOW)


def test_absolute_instant_keeps_aware_datetime():
    at = datetime(2030, 5, 1, 8, 30, tzinfo=timezone(timedelta(hours=2)))
    assert AbsoluteInstant(at).resolve(NOW) == at
    assert AbsoluteInstant(at).at is at


def test_absolute_instant_reads_naive_as_local_time():
    naive = datetime(2030, 5, 1, 8, 30)
    inst = AbsoluteInstant(naive)
    assert inst.at.tzinfo is timezone.utc
    assert inst.at == naive.astimezone(timezone.utc)


@pytest.mark.parametrize(
    "raw, seconds",
    [
        (10, 10.0),
        (2.5, 2.5),
        (-1, -1.0),
        (Decimal("1.5"), 1.5),
        (Fraction(1, 4), 0.25),
        (timedelta(minutes=1), 60.0),
    ],
)
def test_coerce_duration_like(raw, seconds):
    assert coerce_expiry(raw) == RelativeSeconds(seconds)


def test_coerce_datetime():
    assert coerce_expiry(NOW) == AbsoluteInstant(NOW)


def test_coerce_passes_variants_through():
    rel = RelativeSeconds(3)
    inst = AbsoluteInstant(NOW)
    assert coerce_expiry(rel) is rel
    assert coerce_expiry(inst) is inst


def test_coerce_uses_to_expiry():
    assert coerce_expiry(InMinutes(2)) == RelativeSeconds(120)


def test_coerce_rejects_bad_to_expiry_result():
    with pytest.raises(InvalidArgumentError):
        coerce_expiry(Broken())


@pytest.mark.parametrize("raw", ["10", True, None, object(), [1]])
def test_coerce_rejects_unconvertible(raw):
    with pytest.raises(InvalidArgumentError, match="could not be converted to a time"):
        coerce_expiry(raw)


@pytest.mark.parametrize("raw", ["10", None, True, [1]])
def test_relative_seconds_rejects_non_numbers(raw):
    with pytest.raises(InvalidArgumentError):
        RelativeSeconds(raw)


@pytest.mark.parametrize("raw", [10, "2030-01-01", None])
def test_absolute_instant_rejects_non_datetimes(raw):
    with pytest.raises(InvalidArgumentError):
        AbsoluteInstant(raw)


def test_relative_seconds_normalizes_to_float():
    assert RelativeSeconds(Decimal("1.5")).seconds == 1.5
    assert isinstance(RelativeSeconds(3).seconds, float)


@pytest.mark.parametrize("raw", [10**400, -(10**400), Fraction(10**400, 3)])
def test_coerce_rejects_durations_too_large_for_float(raw):
    with pytest.raises(InvalidArgumentError, match="out of range"):
        coerce_expiry(raw)
