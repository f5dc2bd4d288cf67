"""
Data ingestion module for Federal Register API.
"""

from .federal_register import FederalRegisterClient

__all__ = ["FederalRegisterClient"]
