"""
Summarization capability shared by the hosted and remote backends.
"""

from abc import ABC, abstractmethod


class Summarizer(ABC):
    """Turns raw executive order text into a markdown summary.

    Implementations raise ``GenerationError`` on any failure and never
    retry; retries belong to the summary queue.
    """

    model: str

    @property
    def model_name(self) -> str:
        return self.model

    @abstractmethod
    def summarize(self, text: str) -> str:
        """Return the summary for ``text``."""

    @abstractmethod
    def health_check(self) -> bool:
        """Check backend connectivity."""
