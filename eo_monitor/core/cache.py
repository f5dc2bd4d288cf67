"""
Snapshot cache for executive orders and their generated summaries.
"""

from datetime import date, datetime
from typing import Callable, Optional, TYPE_CHECKING
import structlog

from .config import FetchConfig
from .exceptions import NotFoundError
from .models import CachedSnapshot, ExecutiveOrder, SummaryRecord, utc_now

if TYPE_CHECKING:
    from ..ingestion.federal_register import FederalRegisterClient
    from ..orchestration.summary_queue import SummaryQueue
    from ..storage.kv_store import KeyValueStore

logger = structlog.get_logger(__name__)

SNAPSHOT_KEY = "orders"
SUMMARY_KEY = "summary:{document_number}"


def summary_key(document_number: str) -> str:
    return SUMMARY_KEY.format(document_number=document_number)


class OrderCache:
    """Owns the canonical order snapshot.

    Every refresh replaces the snapshot with a single put, so readers see
    either the previous listing or the new one, never a mix.
    """

    def __init__(self,
                 store: "KeyValueStore",
                 fetcher: "FederalRegisterClient",
                 config: Optional[FetchConfig] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.fetcher = fetcher
        self.config = config or FetchConfig()
        self.clock = clock
        self.queue: Optional["SummaryQueue"] = None

    def attach_queue(self, queue: "SummaryQueue") -> None:
        """Enable enqueueing of new orders on refresh."""
        self.queue = queue

    def refresh(self, enqueue_summaries: bool = False) -> CachedSnapshot:
        """
        Fetch the full order window and replace the stored snapshot.

        Args:
            enqueue_summaries: Also queue summaries for orders not yet tracked

        Returns:
            The snapshot that was written

        Raises:
            FetchError: If the upstream fetch fails; nothing is written
        """
        started = self.clock()
        orders = self.fetcher.fetch_executive_orders(
            start_date=self.config.start_date,
            end_date=self._today()
        )

        snapshot = CachedSnapshot(last_updated=self.clock(), orders=orders)
        self.store.put(SNAPSHOT_KEY, snapshot.model_dump_json())

        logger.info("Refreshed order snapshot",
                    orders=len(orders),
                    seconds=round((snapshot.last_updated - started).total_seconds(), 3))

        if enqueue_summaries:
            if self.queue is None:
                logger.warning("Summary enqueue requested but no queue is attached")
            else:
                self.queue.enqueue_new(orders)

        return snapshot

    def get_snapshot(self) -> Optional[CachedSnapshot]:
        """Return the stored snapshot, or None before the first refresh."""
        data = self.store.get(SNAPSHOT_KEY)
        if not data:
            return None
        return CachedSnapshot.model_validate_json(data)

    def get_order(self, document_number: str) -> ExecutiveOrder:
        """
        Look up one order in the current snapshot.

        Raises:
            NotFoundError: If there is no snapshot or the number is unknown
        """
        snapshot = self.get_snapshot()
        if snapshot is None:
            raise NotFoundError(document_number, "No snapshot available")

        order = snapshot.find(document_number)
        if order is None:
            raise NotFoundError(document_number)
        return order

    def get_summary(self, document_number: str) -> Optional[SummaryRecord]:
        data = self.store.get(summary_key(document_number))
        if not data:
            return None
        return SummaryRecord.model_validate_json(data)

    def put_summary(self, record: SummaryRecord) -> None:
        self.store.put(summary_key(record.document_number), record.model_dump_json())
        logger.info("Stored summary", document_number=record.document_number)

    def summary_count(self) -> int:
        return len(self.store.list_keys(SUMMARY_KEY.split("{")[0]))

    def _today(self) -> date:
        return self.clock().date()
