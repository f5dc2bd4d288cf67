"""
Executive Order Monitor

Caches executive orders from the Federal Register and attaches
AI-generated summaries through a bounded retry queue.
"""

__version__ = "1.0.0"
__author__ = "Executive Order Monitor"
