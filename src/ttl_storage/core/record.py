"""
Record: the immutable value stored under each key.
Why: one frozen triple shared by reference; liveness is a pure check.
"""

import time
from dataclasses import dataclass


def now_ms() -> int:
    """Wall-clock milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Record:
    value: str
    ttl_ms: int
    saved_at_ms: int

    @property
    def expires_at_ms(self) -> int:
        return self.saved_at_ms + self.ttl_ms

    def is_live(self, current_ms: int) -> bool:
        return current_ms < self.expires_at_ms

    def remaining_ms(self, current_ms: int) -> int:
        return self.expires_at_ms - current_ms
