"""
Periodic trigger that refreshes the snapshot and works the summary queue.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional
import structlog

from ..core.cache import OrderCache
from .summary_queue import SummaryQueue

logger = structlog.get_logger(__name__)


class Scheduler:
    """Runs refresh and queue processing together on an interval."""

    def __init__(self, cache: OrderCache, queue: SummaryQueue, interval_seconds: float = 3600):
        self.cache = cache
        self.queue = queue
        self.interval_seconds = interval_seconds

    def run_once(self) -> Dict[str, Any]:
        """
        Run one scheduled tick.

        The refresh (with summary enqueueing) and the queue batch run
        concurrently. A failure in one is logged and does not stop the other.

        Returns:
            ``{"refresh": snapshot-or-None, "batch": result-or-None, "errors": {...}}``
        """
        outcome: Dict[str, Any] = {"refresh": None, "batch": None, "errors": {}}

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="eo-tick") as executor:
            futures = {
                "refresh": executor.submit(self.cache.refresh, enqueue_summaries=True),
                "batch": executor.submit(self.queue.process_batch),
            }
            for name, future in futures.items():
                try:
                    outcome[name] = future.result()
                except Exception as e:
                    logger.error("Scheduled task failed", task=name, error=str(e))
                    outcome["errors"][name] = str(e)

        logger.info("Scheduled tick finished",
                    orders=len(outcome["refresh"].orders) if outcome["refresh"] else None,
                    summarized=len(outcome["batch"].completed) if outcome["batch"] else None,
                    errors=list(outcome["errors"]))
        return outcome

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        """Call ``run_once`` every interval until ``stop_event`` is set."""
        stop_event = stop_event or threading.Event()
        logger.info("Scheduler started", interval_seconds=self.interval_seconds)

        while not stop_event.is_set():
            self.run_once()
            stop_event.wait(self.interval_seconds)

        logger.info("Scheduler stopped")
