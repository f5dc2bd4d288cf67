"""
Executive order summarization using a locally hosted Ollama model.
"""

import ollama
from typing import Optional
import structlog

from .base import Summarizer
from .prompts import build_messages
from ..core.config import settings
from ..core.exceptions import GenerationError

logger = structlog.get_logger(__name__)


class OllamaSummarizer(Summarizer):
    """Summarization using the Ollama Python library."""

    def __init__(self,
                 host: Optional[str] = None,
                 model: Optional[str] = None,
                 client: Optional[ollama.Client] = None):
        self.host = host or settings.ollama_host
        self.model = model or settings.summary_model
        self.max_tokens = settings.summary_max_tokens
        self.temperature = settings.summary_temperature

        # Configure Ollama client
        self.client = client or ollama.Client(host=self.host, timeout=settings.http_timeout_seconds * 10)

    def summarize(self, text: str) -> str:
        """
        Generate a markdown summary of an executive order.

        Raises:
            GenerationError: If the model call fails or returns no content
        """
        try:
            response = self.client.chat(
                model=self.model,
                messages=build_messages(text),
                options={"temperature": self.temperature, "num_predict": self.max_tokens}
            )
            content = response["message"]["content"]
        except Exception as e:
            logger.error("Ollama summarization failed", model=self.model, error=str(e))
            raise GenerationError(f"Ollama summarization failed: {e}") from e

        if not content or not content.strip():
            logger.error("Ollama returned an empty summary", model=self.model)
            raise GenerationError("Ollama returned an empty summary")

        logger.debug("Generated summary", model=self.model, length=len(content))
        return content.strip()

    def health_check(self) -> bool:
        """Check that the Ollama server answers."""
        try:
            self.client.list()
            logger.info("Ollama health check passed", host=self.host)
            return True
        except Exception as e:
            logger.error("Ollama health check failed", host=self.host, error=str(e))
            return False
