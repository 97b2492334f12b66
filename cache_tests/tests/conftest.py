import pytest

import timeout_cache.core.cache as cache_mod


class FakeClock:
    """Controllable stand-in for time.time()."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def utc(self):
        return cache_mod._now()


@pytest.fixture
def clock(monkeypatch):
    c = FakeClock(1_700_000_000.0)
    monkeypatch.setattr(cache_mod.time, "time", c)
    return c
