"""Cache fixtures with a clock the test can move forward."""

import pytest

from files_manager.adapters.cache import LocalCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> LocalCache:
    return LocalCache(clock=clock)
