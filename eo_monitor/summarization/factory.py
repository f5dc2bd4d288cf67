"""
Backend selection for summarization.
"""

import structlog

from .base import Summarizer
from .claude_summarizer import ClaudeSummarizer
from .ollama_summarizer import OllamaSummarizer
from ..core.config import settings

logger = structlog.get_logger(__name__)


def get_summarizer(config=None) -> Summarizer:
    """Create the backend named by ``config.summary_backend``.

    The choice is made once at startup; backends are never mixed.
    """
    config = config or settings
    name = config.summary_backend.lower()

    if name == "ollama":
        summarizer = OllamaSummarizer(host=config.ollama_host, model=config.summary_model)
    elif name == "claude":
        summarizer = ClaudeSummarizer(
            api_key=config.claude_api_key,
            api_url=config.claude_api_url,
            model=config.claude_model,
        )
    else:
        raise ValueError(f"Unknown summary backend: {config.summary_backend}")

    logger.info("Selected summary backend", backend=name, model=summarizer.model_name)
    return summarizer
