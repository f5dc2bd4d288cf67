"""
Error taxonomy for the executive order monitor.
"""


class EOMonitorError(Exception):
    """Base class for all monitor errors."""


class FetchError(EOMonitorError):
    """Upstream listing or raw-text retrieval failed."""


class GenerationError(EOMonitorError):
    """The summarization backend failed or returned an unusable response."""


class StorageError(EOMonitorError):
    """A key-value read or write failed."""


class NotFoundError(EOMonitorError):
    """No snapshot exists or the document number is unknown."""

    def __init__(self, document_number: str, message: str = "Order not found"):
        super().__init__(f"{message}: {document_number}")
        self.document_number = document_number
