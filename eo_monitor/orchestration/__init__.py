"""
Queue processing, scheduling and the API-facing service.
"""

from .summary_queue import SummaryQueue
from .scheduler import Scheduler
from .service import OrderService

__all__ = ["SummaryQueue", "Scheduler", "OrderService"]
