"""
Executive order summarization with interchangeable backends.
"""

from .base import Summarizer
from .claude_summarizer import ClaudeSummarizer
from .ollama_summarizer import OllamaSummarizer
from .factory import get_summarizer

__all__ = ["Summarizer", "ClaudeSummarizer", "OllamaSummarizer", "get_summarizer"]
