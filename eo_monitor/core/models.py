"""
Data models for the executive order monitor.
"""

from datetime import date, datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


SUMMARY_PLACEHOLDER = "Summary is being generated..."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QueueStatus(str, Enum):
    """Lifecycle states of a summary queue item."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SummaryFormat(str, Enum):
    MARKDOWN = "markdown"
    TEXT = "text"


class ExecutiveOrder(BaseModel):
    """One executive order as listed by the Federal Register."""
    model_config = ConfigDict(frozen=True)

    document_number: str
    executive_order_number: Optional[str] = None
    title: str
    president: Optional[str] = None
    publication_date: date
    signing_date: Optional[date] = None
    raw_text_url: Optional[str] = None
    pdf_url: Optional[str] = None
    document_type: Optional[str] = None

    @field_validator("executive_order_number", mode="before")
    @classmethod
    def _coerce_order_number(cls, value):
        # The API returns this as an integer for most orders
        if value is None or value == "":
            return None
        return str(value)


class CachedSnapshot(BaseModel):
    """The full cached order listing, replaced wholesale on each refresh."""
    last_updated: datetime
    orders: List[ExecutiveOrder] = Field(default_factory=list)

    def find(self, document_number: str) -> Optional[ExecutiveOrder]:
        for order in self.orders:
            if order.document_number == document_number:
                return order
        return None


class SummaryRecord(BaseModel):
    """Generated summary for one order."""
    document_number: str
    content: str
    format: SummaryFormat = SummaryFormat.MARKDOWN
    model_used: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class QueueItem(BaseModel):
    """A unit of summarization work for one document."""
    document_number: str
    raw_text_url: Optional[str] = None
    status: QueueStatus = QueueStatus.PENDING
    attempts: int = Field(default=0, ge=0)
    last_attempt: Optional[datetime] = None


class BatchResult(BaseModel):
    """Outcome of one queue batch."""
    selected: List[str] = Field(default_factory=list)
    completed: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)  # claimed elsewhere before this batch reached them


class QueueStats(BaseModel):
    total: int = 0
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    exhausted: int = 0  # failed items that reached the retry ceiling


class OrderDetail(BaseModel):
    """An order together with its summary, as returned to API callers."""
    order: ExecutiveOrder
    ai_summary: SummaryRecord
    summary_key: str
    summary_available: bool = False


class OrdersResult(BaseModel):
    """Result of listing orders; ``pending`` until a snapshot exists."""
    pending: bool = False
    message: Optional[str] = None
    last_updated: Optional[datetime] = None
    orders: List[ExecutiveOrder] = Field(default_factory=list)
