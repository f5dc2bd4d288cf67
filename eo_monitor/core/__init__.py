"""
Core module for the executive order monitor.
"""

from .config import settings, Settings, QueueConfig, FetchConfig
from .exceptions import EOMonitorError, FetchError, GenerationError, StorageError, NotFoundError

__all__ = [
    "settings",
    "Settings",
    "QueueConfig",
    "FetchConfig",
    "EOMonitorError",
    "FetchError",
    "GenerationError",
    "StorageError",
    "NotFoundError",
]
