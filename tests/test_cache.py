"""
Tests for the order snapshot cache.
"""
from datetime import date
from unittest.mock import Mock

import pytest

from eo_monitor.core.cache import SNAPSHOT_KEY, OrderCache, summary_key
from eo_monitor.core.config import FetchConfig
from eo_monitor.core.exceptions import FetchError, NotFoundError
from eo_monitor.core.models import QueueStatus, SummaryRecord
from eo_monitor.storage.kv_store import MemoryStore

from conftest import T0, make_order


class TestRefresh:
    """Snapshot refresh behaviour"""

    def test_refresh_writes_timestamped_snapshot(self, cache, fetcher, clock):
        snapshot = cache.refresh()

        assert snapshot.last_updated == T0
        assert [o.document_number for o in snapshot.orders] == ["2025-00001", "2025-00002", "2025-00003"]
        assert cache.get_snapshot() == snapshot

    def test_refresh_uses_configured_window_through_today(self, cache, fetcher):
        cache.refresh()
        assert fetcher.listing_calls == [(date(2017, 1, 20), T0.date())]

    def test_refresh_replaces_previous_snapshot_entirely(self, cache, fetcher, clock):
        cache.refresh()
        fetcher.orders = [make_order(7)]
        clock.advance(3600)

        snapshot = cache.refresh()

        stored = cache.get_snapshot()
        assert [o.document_number for o in stored.orders] == ["2025-00007"]
        assert stored.last_updated == snapshot.last_updated

    def test_fetch_failure_keeps_previous_snapshot(self, cache, fetcher, clock):
        first = cache.refresh()
        fetcher.error = FetchError("503 Service Unavailable")
        clock.advance(3600)

        with pytest.raises(FetchError):
            cache.refresh()

        assert cache.get_snapshot() == first

    def test_fetch_failure_before_first_snapshot_writes_nothing(self, cache, fetcher, store):
        fetcher.error = FetchError("timeout")

        with pytest.raises(FetchError):
            cache.refresh(enqueue_summaries=True)

        assert store.get(SNAPSHOT_KEY) is None
        assert store.list_keys() == []

    def test_refresh_is_a_single_put(self, fetcher, clock):
        store = Mock(wraps=MemoryStore())
        cache = OrderCache(store, fetcher, FetchConfig(), clock=clock)

        cache.refresh()

        snapshot_puts = [c for c in store.put.call_args_list if c[0][0] == SNAPSHOT_KEY]
        assert len(snapshot_puts) == 1, "Snapshot must be written with exactly one put"

    def test_refresh_enqueues_new_orders_when_requested(self, cache, queue):
        cache.refresh(enqueue_summaries=True)

        items = queue.load()
        assert [i.document_number for i in items] == ["2025-00001", "2025-00002", "2025-00003"]
        assert all(i.status == QueueStatus.PENDING for i in items)

    def test_refresh_without_enqueue_leaves_queue_alone(self, cache, queue):
        cache.refresh()
        assert queue.load() == []

    def test_enqueue_without_attached_queue_is_ignored(self, cache, store):
        cache.refresh(enqueue_summaries=True)
        assert store.list_keys() == [SNAPSHOT_KEY]


class TestLookups:
    """Snapshot and summary reads"""

    def test_no_snapshot_before_refresh(self, cache):
        assert cache.get_snapshot() is None

    def test_get_order_without_snapshot(self, cache):
        with pytest.raises(NotFoundError) as exc_info:
            cache.get_order("2025-00001")
        assert exc_info.value.document_number == "2025-00001"

    def test_get_order_unknown_number(self, cache):
        cache.refresh()
        with pytest.raises(NotFoundError):
            cache.get_order("1999-99999")

    def test_get_order_found(self, cache):
        cache.refresh()
        order = cache.get_order("2025-00002")
        assert order.title == "Executive Order 2"
        assert order.executive_order_number == "14102"

    def test_summary_round_trip(self, cache, store):
        record = SummaryRecord(document_number="2025-00001", content="## Purpose\n\nText", created_at=T0)
        cache.put_summary(record)

        assert store.get(summary_key("2025-00001")) is not None
        assert cache.get_summary("2025-00001") == record
        assert cache.get_summary("2025-00002") is None
        assert cache.summary_count() == 1
