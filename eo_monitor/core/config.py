"""
Configuration management for the executive order monitor.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class QueueConfig:
    """Limits for the summary queue."""
    max_concurrent_requests: int = 5
    retry_delay: timedelta = timedelta(seconds=60)
    max_retries: int = 3
    # None disables recovery of items left in "processing"
    processing_timeout: Optional[timedelta] = timedelta(minutes=15)


@dataclass(frozen=True)
class FetchConfig:
    """Window and paging used when refreshing the order snapshot."""
    start_date: date = date(2017, 1, 20)
    per_page: int = 50
    max_pages: Optional[int] = None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Federal Register API
    federal_register_base_url: str = Field(
        "https://www.federalregister.gov/api/v1/", alias="FEDERAL_REGISTER_BASE_URL"
    )
    orders_start_date: date = Field(date(2017, 1, 20), alias="ORDERS_START_DATE")
    per_page: int = Field(50, alias="PER_PAGE")
    max_pages: Optional[int] = Field(None, alias="MAX_PAGES")
    http_timeout_seconds: float = Field(30.0, alias="HTTP_TIMEOUT_SECONDS")

    # Key-value store
    store_backend: str = Field("redis", alias="STORE_BACKEND")
    redis_host: str = Field("localhost", alias="REDIS_HOST")
    redis_port: int = Field(6379, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(None, alias="REDIS_PASSWORD")
    redis_db: int = Field(0, alias="REDIS_DB")

    # Summarization backends
    summary_backend: str = Field("ollama", alias="SUMMARY_BACKEND")
    ollama_host: str = Field("http://localhost:11434", alias="OLLAMA_HOST")
    summary_model: str = Field("llama3.2:3b", alias="SUMMARY_MODEL")
    claude_api_key: Optional[str] = Field(None, alias="CLAUDE_API_KEY")
    claude_api_url: str = Field("https://api.anthropic.com/v1/messages", alias="CLAUDE_API_URL")
    claude_model: str = Field("claude-3-5-sonnet-20241022", alias="CLAUDE_MODEL")
    summary_max_tokens: int = Field(1024, alias="SUMMARY_MAX_TOKENS")
    summary_temperature: float = Field(0.3, alias="SUMMARY_TEMPERATURE")

    # Summary queue
    max_concurrent_requests: int = Field(5, alias="MAX_CONCURRENT_REQUESTS")
    retry_delay_seconds: int = Field(60, alias="RETRY_DELAY_SECONDS")
    max_retries: int = Field(3, alias="MAX_RETRIES")
    processing_timeout_seconds: int = Field(900, alias="PROCESSING_TIMEOUT_SECONDS")

    # Scheduling and API behaviour
    schedule_interval_seconds: int = Field(3600, alias="SCHEDULE_INTERVAL_SECONDS")
    allow_regenerate: bool = Field(False, alias="ALLOW_REGENERATE")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    def queue_config(self) -> QueueConfig:
        """Build the summary queue limits."""
        timeout = None
        if self.processing_timeout_seconds > 0:
            timeout = timedelta(seconds=self.processing_timeout_seconds)
        return QueueConfig(
            max_concurrent_requests=self.max_concurrent_requests,
            retry_delay=timedelta(seconds=self.retry_delay_seconds),
            max_retries=self.max_retries,
            processing_timeout=timeout,
        )

    def fetch_config(self) -> FetchConfig:
        """Build the snapshot refresh window."""
        return FetchConfig(
            start_date=self.orders_start_date,
            per_page=self.per_page,
            max_pages=self.max_pages,
        )


# Global settings instance
settings = Settings()
