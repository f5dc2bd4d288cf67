"""
Executive order summarization through the Anthropic Messages API.
"""

import requests
from typing import Optional
import structlog

from .base import Summarizer
from .prompts import SYSTEM_PROMPT, build_user_prompt
from ..core.config import settings
from ..core.exceptions import GenerationError

logger = structlog.get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeSummarizer(Summarizer):
    """Summarization using a remote LLM API with an API-key header."""

    def __init__(self,
                 api_key: Optional[str] = None,
                 api_url: Optional[str] = None,
                 model: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.api_key = api_key or settings.claude_api_key
        self.api_url = api_url or settings.claude_api_url
        self.model = model or settings.claude_model
        self.max_tokens = settings.summary_max_tokens
        self.temperature = settings.summary_temperature
        self.timeout = timeout or settings.http_timeout_seconds * 4

        if not self.api_key:
            logger.warning("CLAUDE_API_KEY is not set, summarization calls will fail")

        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "x-api-key": self.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION
        })

    def summarize(self, text: str) -> str:
        """
        Generate a markdown summary of an executive order.

        Raises:
            GenerationError: If the API call fails or the response has no text
        """
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": SYSTEM_PROMPT,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": build_user_prompt(text)}]
                }
            ]
        }

        try:
            response = self.session.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Claude API call failed", error=str(e))
            raise GenerationError(f"Claude API call failed: {e}") from e

        if not response.ok:
            message = self._error_message(response)
            logger.error("Claude API error", status_code=response.status_code, error=message)
            raise GenerationError(f"Claude API error: {message}")

        try:
            data = response.json()
            content = data["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Invalid response format from Claude API", error=str(e))
            raise GenerationError("Invalid response format from Claude API") from e

        if not content or not content.strip():
            raise GenerationError("Claude API returned an empty summary")

        logger.debug("Generated summary", model=self.model, length=len(content))
        return content.strip()

    def _error_message(self, response: requests.Response) -> str:
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.reason or f"HTTP {response.status_code}"

    def health_check(self) -> bool:
        """Check API connectivity and authentication with a minimal call."""
        test_payload = {
            "model": self.model,
            "max_tokens": 5,
            "messages": [{"role": "user", "content": "Test"}]
        }
        try:
            response = self.session.post(self.api_url, json=test_payload, timeout=10)
        except requests.RequestException as e:
            logger.error("Claude health check failed", error=str(e))
            return False

        if response.status_code == 200:
            logger.info("Claude health check passed", model=self.model)
            return True

        logger.error("Claude health check failed",
                     status_code=response.status_code,
                     response=response.text[:200])
        return False
