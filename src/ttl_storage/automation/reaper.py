"""
APScheduler job that evicts expired records from the Store.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ttl_storage.core.logging import get_logger
from ttl_storage.core.metrics import metrics
from ttl_storage.storage.store import Store

logger = get_logger(__name__)

JOB_ID = "ttl_reaper"


class Reaper:
    """Fixed-rate background sweep over the Store.

    Readers already hide expired records; the reaper only bounds memory.
    """

    def __init__(
        self,
        store: Store,
        period_ms: Optional[int] = None,
        initial_delay_ms: int = 1,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self.store = store
        self.period_ms = period_ms if period_ms is not None else store.default_ttl_ms // 10
        self.initial_delay_ms = initial_delay_ms
        # daemon thread: never holds the process open
        self.scheduler = scheduler or BackgroundScheduler(daemon=True)

    def sweep(self) -> int:
        """Run one tick. Failures are logged so the job keeps running."""
        try:
            evicted = self.store.evict_expired()
        except Exception as e:
            logger.error(f"Reaper tick failed: {e}", exc_info=True)
            return 0
        if evicted:
            metrics.record_reaped(evicted)
            logger.debug(f"Reaper evicted {evicted} expired records")
        return evicted

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Schedule the sweep and start the scheduler thread."""
        first_run = datetime.now(timezone.utc) + timedelta(milliseconds=self.initial_delay_ms)
        self.scheduler.add_job(
            self.sweep,
            trigger=IntervalTrigger(seconds=self.period_ms / 1000),
            id=JOB_ID,
            next_run_time=first_run,
            coalesce=True,
            max_instances=1,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(f"Reaper started (period={self.period_ms}ms)")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reaper stopped")
