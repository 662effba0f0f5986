"""
Concurrent in-memory key -> Record store with TTL.

This module provides the Store class that maps a textual key to an immutable
Record(value, ttl_ms, saved_at_ms). Readers filter by the liveness predicate,
so expired records are never observable even before the reaper removes them.
"""

import threading
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ttl_storage.core.errors import InvalidTTLError
from ttl_storage.core.formatter import Reading, read
from ttl_storage.core.logging import get_logger
from ttl_storage.core.record import Record, now_ms
from ttl_storage.core.ttl_policy import DEFAULT_TTL_MS, MIN_TTL_MS, TTLInput, resolve_ttl

logger = get_logger(__name__)

Clock = Callable[[], int]


class Store:
    """
    Thread-safe mapping from key to Record.

    Features:
    - Per-key atomic set/remove under a short lock (never held across I/O)
    - Reads hide expired records via the liveness predicate
    - Compare-and-delete primitive for the background reaper
    - Whole-map swap by reference for snapshot restore

    Args:
        default_ttl_ms: TTL applied when set() is called without one
        clock: Millisecond wall clock (injectable for tests)

    Raises:
        InvalidTTLError: If default_ttl_ms is not > 100

    Example:
        >>> store = Store()
        >>> record = store.set("greeting", "hello", 60_000)
        >>> store.get("greeting").value
        'hello'
    """

    def __init__(self, default_ttl_ms: int = DEFAULT_TTL_MS, clock: Optional[Clock] = None):
        if isinstance(default_ttl_ms, bool) or default_ttl_ms <= MIN_TTL_MS:
            raise InvalidTTLError()
        self.default_ttl_ms = default_ttl_ms
        self._clock: Clock = clock or now_ms
        self._lock = threading.Lock()
        self._records: Dict[str, Record] = {}

    def now(self) -> int:
        return self._clock()

    def set(self, key: str, value: str, ttl_ms: TTLInput = None) -> Record:
        """Install a fresh Record at key, replacing any previous one.

        Raises:
            InvalidTTLError: If ttl_ms is given and not > 100; the store is unchanged
        """
        effective_ttl = resolve_ttl(ttl_ms, self.default_ttl_ms)
        record = Record(value=value, ttl_ms=effective_ttl, saved_at_ms=self.now())
        with self._lock:
            self._records[key] = record
        logger.debug(f"Stored key={key!r} ttl_ms={effective_ttl}")
        return record

    def get_record(self, key: str) -> Optional[Record]:
        """Return the live Record at key, or None if absent or expired."""
        current = self.now()
        with self._lock:
            record = self._records.get(key)
        if record is None or not record.is_live(current):
            return None
        return record

    def get(self, key: str) -> Optional[Reading]:
        """Return (value, remaining_seconds) for a live key, else None."""
        current = self.now()
        with self._lock:
            record = self._records.get(key)
        if record is None or not record.is_live(current):
            logger.debug(f"No live record for key={key!r}")
            return None
        return read(record, current)

    def remove(self, key: str) -> Optional[Record]:
        """Delete key and return its Record.

        An expired record still physically present is dropped as well, but is
        reported as None to stay consistent with get().
        """
        current = self.now()
        with self._lock:
            record = self._records.pop(key, None)
        if record is None or not record.is_live(current):
            logger.debug(f"Nothing to remove for key={key!r}")
            return None
        logger.debug(f"Removed key={key!r}")
        return record

    def get_all(self) -> Dict[str, Record]:
        """Copy of all live records."""
        current = self.now()
        with self._lock:
            items = list(self._records.items())
        return {key: rec for key, rec in items if rec.is_live(current)}

    def items(self) -> List[Tuple[str, Record]]:
        """Physical snapshot of every stored (key, Record), expired ones included."""
        with self._lock:
            return list(self._records.items())

    def remove_if_same(self, key: str, record: Record) -> bool:
        """Delete key only if it still maps to this exact Record object."""
        with self._lock:
            if self._records.get(key) is record:
                del self._records[key]
                return True
        return False

    def evict_expired(self, current_ms: Optional[int] = None) -> int:
        """Physically remove every non-live record; returns how many went."""
        current = self.now() if current_ms is None else current_ms
        evicted = 0
        for key, record in self.items():
            if not record.is_live(current) and self.remove_if_same(key, record):
                evicted += 1
        return evicted

    def replace_all(self, records: Mapping[str, Record]) -> None:
        """Swap the whole record set in one step."""
        fresh = dict(records)
        with self._lock:
            self._records = fresh
        logger.info(f"Store replaced with {len(fresh)} records")

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records
