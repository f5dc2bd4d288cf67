"""
Tests for the API-facing order service.
"""
import pytest

from eo_monitor.core.exceptions import FetchError, NotFoundError
from eo_monitor.core.models import SUMMARY_PLACEHOLDER, SummaryFormat, SummaryRecord
from eo_monitor.orchestration.service import PROCESSING_MESSAGE, OrderService

from conftest import T0


@pytest.fixture
def service(cache, queue):
    return OrderService(cache, queue)


class TestListOrders:

    def test_pending_until_first_snapshot(self, service, cache):
        result = service.list_orders()

        assert result.pending is True
        assert result.message == PROCESSING_MESSAGE
        assert result.orders == []

        assert service.wait_for_refresh(timeout=5)
        assert cache.get_snapshot() is not None, "A refresh should have been started"

    def test_returns_snapshot_orders(self, service, cache):
        cache.refresh()

        result = service.list_orders()

        assert result.pending is False
        assert result.last_updated == T0
        assert len(result.orders) == 3

    def test_failed_background_refresh_stays_pending(self, service, fetcher):
        fetcher.error = FetchError("upstream down")

        assert service.list_orders().pending is True
        assert service.wait_for_refresh(timeout=5)
        assert service.list_orders().pending is True


class TestGetOrder:

    def test_placeholder_until_summary_exists(self, service, cache):
        cache.refresh()

        detail = service.get_order("2025-00001")

        assert detail.order.document_number == "2025-00001"
        assert detail.ai_summary.content == SUMMARY_PLACEHOLDER
        assert detail.ai_summary.format == SummaryFormat.TEXT
        assert detail.summary_available is False
        assert detail.summary_key == "summary:2025-00001"

    def test_includes_generated_summary(self, service, cache):
        cache.refresh()
        cache.put_summary(SummaryRecord(document_number="2025-00001", content="## Purpose"))

        detail = service.get_order("2025-00001")

        assert detail.ai_summary.content == "## Purpose"
        assert detail.ai_summary.format == SummaryFormat.MARKDOWN
        assert detail.summary_available is True

    def test_unknown_order(self, service, cache):
        cache.refresh()
        with pytest.raises(NotFoundError):
            service.get_order("1999-00001")

    def test_no_snapshot(self, service):
        with pytest.raises(NotFoundError):
            service.get_order("2025-00001")


class TestRegenerateSummary:

    def test_disabled_by_default(self, service, cache, summarizer):
        cache.refresh()
        assert service.regenerate_summary("2025-00001") is None
        assert summarizer.calls == []

    def test_enabled(self, cache, queue, summarizer):
        cache.refresh()
        service = OrderService(cache, queue, allow_regenerate=True)

        record = service.regenerate_summary("2025-00001")

        assert record.format == SummaryFormat.MARKDOWN
        assert service.get_order("2025-00001").summary_available is True


def test_trigger_refresh(service, cache):
    snapshot = service.trigger_refresh()
    assert cache.get_snapshot() == snapshot
