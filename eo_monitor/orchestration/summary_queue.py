"""
Bounded retry queue for background summary generation.

The whole queue is stored as one JSON list under ``summary_queue`` and is
rewritten after every status change. Within one process all rewrites go
through a lock and re-read the stored list first, so items appended by a
concurrent refresh are kept. Separate processes sharing the same store are
last-writer-wins.
"""

import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, TYPE_CHECKING
import structlog
from pydantic import TypeAdapter

from ..core.cache import OrderCache
from ..core.config import QueueConfig
from ..core.exceptions import FetchError, StorageError
from ..core.models import (
    BatchResult, ExecutiveOrder, QueueItem, QueueStats, QueueStatus,
    SummaryFormat, SummaryRecord, utc_now
)
from ..summarization.base import Summarizer

if TYPE_CHECKING:
    from ..ingestion.federal_register import FederalRegisterClient
    from ..storage.kv_store import KeyValueStore

logger = structlog.get_logger(__name__)

QUEUE_KEY = "summary_queue"

_items_adapter = TypeAdapter(List[QueueItem])


class SummaryQueue:
    """Per-document summarization work with a retry ceiling and delay."""

    def __init__(self,
                 store: "KeyValueStore",
                 cache: OrderCache,
                 fetcher: "FederalRegisterClient",
                 summarizer: Summarizer,
                 config: Optional[QueueConfig] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.cache = cache
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.config = config or QueueConfig()
        self.clock = clock
        self._lock = threading.Lock()

    def load(self) -> List[QueueItem]:
        data = self.store.get(QUEUE_KEY)
        if not data:
            return []
        return _items_adapter.validate_json(data)

    def save(self, items: List[QueueItem]) -> None:
        self.store.put(QUEUE_KEY, _items_adapter.dump_json(items).decode("utf-8"))

    def enqueue_new(self, orders: Iterable[ExecutiveOrder]) -> List[QueueItem]:
        """
        Append a pending item for every order not already in the queue.

        Items keep the input order. Nothing is written when no order is new.

        Returns:
            The items that were appended
        """
        with self._lock:
            items = self.load()
            tracked = {item.document_number for item in items}
            new_items = []

            for order in orders:
                if order.document_number in tracked:
                    continue
                if not order.raw_text_url:
                    logger.warning("Queued order has no raw text URL",
                                   document_number=order.document_number)
                new_items.append(QueueItem(
                    document_number=order.document_number,
                    raw_text_url=order.raw_text_url,
                ))
                tracked.add(order.document_number)

            if new_items:
                self.save(items + new_items)
                logger.info("Queued summaries", added=len(new_items), total=len(items) + len(new_items))

        return new_items

    def is_eligible(self, item: QueueItem, now: datetime) -> bool:
        """Whether ``item`` may be picked up at ``now``."""
        if item.status == QueueStatus.PENDING:
            return True
        if item.attempts >= self.config.max_retries:
            return False

        if item.status == QueueStatus.FAILED:
            return item.last_attempt is None or now - item.last_attempt >= self.config.retry_delay

        # Recover items left in "processing" by an interrupted run
        if item.status == QueueStatus.PROCESSING and self.config.processing_timeout is not None:
            return item.last_attempt is None or now - item.last_attempt >= self.config.processing_timeout

        return False

    def eligible_items(self, now: Optional[datetime] = None) -> List[QueueItem]:
        """Eligible items in queue order."""
        now = now or self.clock()
        return [item for item in self.load() if self.is_eligible(item, now)]

    def is_abandoned(self, item: QueueItem, now: datetime) -> bool:
        """A stale ``processing`` item that has no retries left."""
        timeout = self.config.processing_timeout
        if item.status != QueueStatus.PROCESSING or timeout is None:
            return False
        if item.attempts < self.config.max_retries:
            return False
        return item.last_attempt is None or now - item.last_attempt >= timeout

    def _fail_abandoned(self, now: datetime) -> None:
        # caller holds the lock
        items = self.load()
        abandoned = [item for item in items if self.is_abandoned(item, now)]
        if not abandoned:
            return
        for item in abandoned:
            item.status = QueueStatus.FAILED
            logger.warning("Abandoned queue item marked failed",
                           document_number=item.document_number,
                           attempts=item.attempts)
        self.save(items)

    def process_batch(self) -> BatchResult:
        """
        Summarize up to ``max_concurrent_requests`` eligible items, one at a time.

        Fetch and generation failures mark the item failed and the batch
        continues. Storage failures propagate.
        """
        with self._lock:
            self._fail_abandoned(self.clock())
            batch = self.eligible_items()[:self.config.max_concurrent_requests]

        result = BatchResult(selected=[item.document_number for item in batch])
        if not batch:
            logger.debug("No eligible queue items")
            return result

        logger.info("Processing summary batch", items=len(batch))

        for item in batch:
            outcome = self._process_item(item.document_number)
            if outcome is None:
                result.skipped.append(item.document_number)
            elif outcome:
                result.completed.append(item.document_number)
            else:
                result.failed.append(item.document_number)

        logger.info("Completed summary batch",
                    completed=len(result.completed),
                    failed=len(result.failed),
                    skipped=len(result.skipped))
        return result

    def _process_item(self, document_number: str) -> Optional[bool]:
        """Run one item; None when it is no longer eligible."""
        item = self._claim(document_number)
        if item is None:
            return None

        try:
            if not item.raw_text_url:
                raise FetchError(f"No raw text URL for {document_number}")
            text = self.fetcher.fetch_raw_text(item.raw_text_url)
            content = self.summarizer.summarize(text)
            self.cache.put_summary(SummaryRecord(
                document_number=document_number,
                content=content,
                format=SummaryFormat.MARKDOWN,
                model_used=self.summarizer.model_name,
                created_at=self.clock(),
            ))
        except StorageError:
            raise
        except Exception as e:
            logger.error("Failed to process summary",
                         document_number=document_number,
                         attempts=item.attempts,
                         error=str(e))
            self._set_status(document_number, QueueStatus.FAILED)
            return False

        self._set_status(document_number, QueueStatus.COMPLETED)
        logger.info("Generated summary", document_number=document_number, attempts=item.attempts)
        return True

    def _claim(self, document_number: str) -> Optional[QueueItem]:
        """Mark an item processing and persist the queue immediately."""
        with self._lock:
            items = self.load()
            now = self.clock()
            item = _find(items, document_number)
            if item is None or not self.is_eligible(item, now):
                logger.info("Queue item no longer eligible", document_number=document_number)
                return None

            item.status = QueueStatus.PROCESSING
            item.attempts += 1
            item.last_attempt = now
            self.save(items)
            return item.model_copy()

    def _set_status(self, document_number: str, status: QueueStatus) -> None:
        with self._lock:
            items = self.load()
            item = _find(items, document_number)
            if item is None:
                logger.warning("Queue item disappeared", document_number=document_number)
                return
            item.status = status
            self.save(items)

    def regenerate(self, document_number: str) -> SummaryRecord:
        """
        Regenerate one order's summary immediately, bypassing the queue limits.

        Raises:
            NotFoundError: If the order is not in the snapshot
            FetchError: If the raw text cannot be retrieved
            GenerationError: If the backend fails
        """
        order = self.cache.get_order(document_number)
        if not order.raw_text_url:
            raise FetchError(f"No raw text URL for {document_number}")

        text = self.fetcher.fetch_raw_text(order.raw_text_url)
        record = SummaryRecord(
            document_number=document_number,
            content=self.summarizer.summarize(text),
            format=SummaryFormat.MARKDOWN,
            model_used=self.summarizer.model_name,
            created_at=self.clock(),
        )
        self.cache.put_summary(record)

        with self._lock:
            items = self.load()
            item = _find(items, document_number)
            # a running batch owns a processing item and sets its final status
            if item is not None and item.status not in (QueueStatus.COMPLETED, QueueStatus.PROCESSING):
                item.status = QueueStatus.COMPLETED
                self.save(items)

        logger.info("Regenerated summary", document_number=document_number)
        return record

    def stats(self) -> QueueStats:
        stats = QueueStats()
        now = self.clock()
        for item in self.load():
            stats.total += 1
            if item.status == QueueStatus.PENDING:
                stats.pending += 1
            elif item.status == QueueStatus.PROCESSING and not self.is_abandoned(item, now):
                stats.processing += 1
            elif item.status == QueueStatus.COMPLETED:
                stats.completed += 1
            else:
                stats.failed += 1
                if item.attempts >= self.config.max_retries:
                    stats.exhausted += 1
        return stats


def _find(items: List[QueueItem], document_number: str) -> Optional[QueueItem]:
    for item in items:
        if item.document_number == document_number:
            return item
    return None
