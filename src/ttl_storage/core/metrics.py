"""
In-memory metrics for the /metrics endpoint (rough p50/p95).
Why: quick visibility into request load and reaper work without Prometheus.
"""

import threading
from collections import deque
from typing import Deque, Dict, List

_MAX_SAMPLES = 10_000


def _percentile(values: List[int], p: float) -> int:
    if not values:
        return 0
    idx = max(0, min(len(values) - 1, int(len(values) * p)))
    return sorted(values)[idx]


class _Metrics:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.total_requests = 0
        self.total_errors = 0
        self.records_reaped = 0
        self._latencies: Deque[int] = deque(maxlen=_MAX_SAMPLES)

    def increment_requests(self) -> None:
        with self._lock:
            self.total_requests += 1

    def increment_errors(self) -> None:
        with self._lock:
            self.total_errors += 1

    def record_latency(self, ms: int) -> None:
        with self._lock:
            self._latencies.append(ms)

    def record_reaped(self, count: int) -> None:
        with self._lock:
            self.records_reaped += count

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            lat = list(self._latencies)
            return {
                "total_requests": self.total_requests,
                "total_errors": self.total_errors,
                "records_reaped": self.records_reaped,
                "p50_ms": _percentile(lat, 0.50),
                "p95_ms": _percentile(lat, 0.95),
            }


metrics = _Metrics()
