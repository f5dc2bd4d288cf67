"""
Shared fixtures: an in-memory store, a controllable clock and fake
collaborators for the Federal Register and the summarization backend.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from eo_monitor.core.cache import OrderCache
from eo_monitor.core.config import FetchConfig, QueueConfig
from eo_monitor.core.exceptions import FetchError, GenerationError
from eo_monitor.core.models import ExecutiveOrder
from eo_monitor.orchestration.summary_queue import SummaryQueue
from eo_monitor.storage.kv_store import MemoryStore
from eo_monitor.summarization.base import Summarizer

T0 = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


class FakeFetcher:
    """Stands in for FederalRegisterClient."""

    def __init__(self, orders=None):
        self.orders = list(orders or [])
        self.error = None
        self.failing_urls = set()
        self.listing_calls = []
        self.text_calls = []

    def fetch_executive_orders(self, start_date=None, end_date=None):
        self.listing_calls.append((start_date, end_date))
        if self.error:
            raise self.error
        return list(self.orders)

    def fetch_raw_text(self, url):
        self.text_calls.append(url)
        if url in self.failing_urls:
            raise FetchError(f"404 for {url}")
        return f"Executive order text from {url}"

    def health_check(self):
        return True


class FakeSummarizer(Summarizer):
    """Backend that echoes its input, or fails on demand."""

    def __init__(self):
        self.model = "fake-model"
        self.fail = False
        self.calls = []
        self.on_call = None

    def summarize(self, text):
        self.calls.append(text)
        if self.on_call:
            self.on_call(text)
        if self.fail:
            raise GenerationError("backend unavailable")
        return f"## Summary\n\n{text}"

    def health_check(self):
        return True


def make_order(n, raw_text_url=True):
    return ExecutiveOrder(
        document_number=f"2025-{n:05d}",
        executive_order_number=str(14100 + n),
        title=f"Executive Order {n}",
        president="Test President",
        publication_date=date(2025, 1, 20) + timedelta(days=n),
        signing_date=date(2025, 1, 17) + timedelta(days=n),
        raw_text_url=f"https://www.federalregister.gov/documents/full_text/text/{n}.txt" if raw_text_url else None,
        pdf_url=f"https://www.govinfo.gov/content/pkg/FR/pdf/{n}.pdf",
        document_type="Presidential Document",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fetcher():
    return FakeFetcher([make_order(n) for n in range(1, 4)])


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def queue_config():
    return QueueConfig(
        max_concurrent_requests=5,
        retry_delay=timedelta(seconds=60),
        max_retries=3,
        processing_timeout=timedelta(minutes=15),
    )


@pytest.fixture
def cache(store, fetcher, clock):
    return OrderCache(store, fetcher, FetchConfig(start_date=date(2017, 1, 20)), clock=clock)


@pytest.fixture
def queue(store, cache, fetcher, summarizer, queue_config, clock):
    summary_queue = SummaryQueue(store, cache, fetcher, summarizer, queue_config, clock=clock)
    cache.attach_queue(summary_queue)
    return summary_queue
