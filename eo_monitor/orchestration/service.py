"""
Read paths behind the HTTP endpoints: list orders, get one order with its
summary, trigger a refresh and (normally disabled) regenerate a summary.
"""

import threading
from typing import Optional
import structlog

from ..core.cache import OrderCache, summary_key
from ..core.models import (
    CachedSnapshot, OrderDetail, OrdersResult, SummaryFormat, SummaryRecord,
    SUMMARY_PLACEHOLDER
)
from .summary_queue import SummaryQueue

logger = structlog.get_logger(__name__)

PROCESSING_MESSAGE = "Data is being processed"


class OrderService:
    """Facade used by the API layer; holds no business rules of its own."""

    def __init__(self, cache: OrderCache, queue: SummaryQueue, allow_regenerate: bool = False):
        self.cache = cache
        self.queue = queue
        self.allow_regenerate = allow_regenerate
        self._refresh_lock = threading.Lock()
        self._refresh_thread: Optional[threading.Thread] = None

    def list_orders(self) -> OrdersResult:
        """
        Return cached orders.

        Before the first snapshot exists this starts a background refresh
        and returns a pending result instead of waiting for the fetch.
        """
        snapshot = self.cache.get_snapshot()
        if snapshot is not None:
            return OrdersResult(last_updated=snapshot.last_updated, orders=snapshot.orders)

        self._start_background_refresh()
        return OrdersResult(pending=True, message=PROCESSING_MESSAGE)

    def wait_for_refresh(self, timeout: Optional[float] = None) -> bool:
        """Wait for a background refresh; True when none is running."""
        thread = self._refresh_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _start_background_refresh(self) -> None:
        with self._refresh_lock:
            if self._refresh_thread is not None and self._refresh_thread.is_alive():
                return
            self._refresh_thread = threading.Thread(
                target=self._refresh_quietly, name="eo-initial-refresh", daemon=True
            )
            self._refresh_thread.start()

    def _refresh_quietly(self) -> None:
        try:
            self.cache.refresh()
        except Exception as e:
            logger.error("Background refresh failed", error=str(e))

    def get_order(self, document_number: str) -> OrderDetail:
        """
        Return one order with its summary or a placeholder.

        Raises:
            NotFoundError: If the order is unknown
        """
        order = self.cache.get_order(document_number)
        summary = self.cache.get_summary(document_number)

        if summary is None:
            return OrderDetail(
                order=order,
                ai_summary=SummaryRecord(
                    document_number=document_number,
                    content=SUMMARY_PLACEHOLDER,
                    format=SummaryFormat.TEXT,
                ),
                summary_key=summary_key(document_number),
            )

        return OrderDetail(
            order=order,
            ai_summary=summary,
            summary_key=summary_key(document_number),
            summary_available=True,
        )

    def trigger_refresh(self) -> CachedSnapshot:
        return self.cache.refresh()

    def regenerate_summary(self, document_number: str) -> Optional[SummaryRecord]:
        """Regenerate a summary when enabled; returns None when disabled."""
        if not self.allow_regenerate:
            logger.info("Summary regeneration is disabled", document_number=document_number)
            return None
        return self.queue.regenerate(document_number)
