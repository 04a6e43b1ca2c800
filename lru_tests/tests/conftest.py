import pytest


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class EvictionRecorder:
    """Collects (key, value) pairs passed to on_eviction."""

    def __init__(self) -> None:
        self.calls = []

    def __call__(self, key, value) -> None:
        self.calls.append((key, value))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def evictions():
    return EvictionRecorder()
