import pytest

from spellseeker.services.cost_controls import reset_usage_tracker


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def fresh_usage_tracker():
    """Reset the global usage tracker between tests.

    The tracker is a module-level singleton; without this, request
    windows filled by one API test would leak into the next.
    """
    reset_usage_tracker()
    yield
    reset_usage_tracker()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
