"""
Tests for data model serialization.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from eo_monitor.core.models import CachedSnapshot, ExecutiveOrder, QueueItem, QueueStatus

from conftest import T0, make_order


def test_order_number_is_coerced_to_string():
    order = ExecutiveOrder(
        document_number="2025-02004",
        executive_order_number=14180,
        title="Example",
        publication_date="2025-01-31",
    )
    assert order.executive_order_number == "14180"
    assert order.publication_date == date(2025, 1, 31)


def test_orders_are_immutable():
    order = make_order(1)
    with pytest.raises(ValidationError):
        order.title = "Changed"


def test_queue_item_json_round_trip():
    item = QueueItem(
        document_number="2025-00001",
        raw_text_url="https://example.test/1.txt",
        status=QueueStatus.FAILED,
        attempts=2,
        last_attempt=T0,
    )

    reloaded = QueueItem.model_validate_json(item.model_dump_json())

    assert reloaded.status == QueueStatus.FAILED
    assert reloaded.attempts == 2
    assert reloaded.last_attempt == T0


def test_attempts_cannot_be_negative():
    with pytest.raises(ValidationError):
        QueueItem(document_number="A", raw_text_url="https://example.test/a.txt", attempts=-1)


def test_snapshot_find():
    snapshot = CachedSnapshot(last_updated=T0, orders=[make_order(1), make_order(2)])
    assert snapshot.find("2025-00002").title == "Executive Order 2"
    assert snapshot.find("2025-00009") is None
