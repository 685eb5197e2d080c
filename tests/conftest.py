"""Shared fixtures for magic link tests."""

import pytest

NOW = 1_700_000_000


class FakeClock:
    """Settable clock for driving token expiry without sleeping."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingVerify:
    """Verify callback that records every outcome it receives."""

    def __init__(self, result="ok"):
        self.result = result
        self.outcomes = []

    async def __call__(self, outcome):
        self.outcomes.append(outcome)
        return self.result

    @property
    def last(self):
        return self.outcomes[-1]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def verify():
    return RecordingVerify()
