"""Shared fixtures: a controllable clock and stores built on it."""

import pytest

from ttl_storage.storage.snapshot import SnapshotCodec
from ttl_storage.storage.store import Store

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond wall clock that only moves when told to."""

    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return Store(clock=clock)


@pytest.fixture
def codec(tmp_path):
    return SnapshotCodec(tmp_path / "storage-state.json")
