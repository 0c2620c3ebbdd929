"""Shared fixtures: in-memory storage, a controllable clock and seeded randomness."""

import random

import pytest

from lane_racer.storage import KeyValueStore, BestScoreStore, LeaderboardStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.ms = start

    def __call__(self) -> float:
        return self.ms

    def advance(self, ms: float):
        self.ms += ms


class ScriptedRandom(random.Random):
    """random() returns the scripted values in order."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


@pytest.fixture
def kv():
    store = KeyValueStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def best_store(kv):
    return BestScoreStore(kv)


@pytest.fixture
def clock():
    return FakeClock(start=10_000_000.0)


@pytest.fixture
def leaderboard(kv, clock):
    return LeaderboardStore(kv, clock=clock)


@pytest.fixture
def rng():
    return random.Random(1234)
