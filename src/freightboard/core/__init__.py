"""
Core infrastructure for the freight board.

This module provides:
- Config: Configuration management
- Exceptions: Error types surfaced to callers
- Logging: structlog setup
"""

from .config import ConfigManager, PricingConfig, get_config
from .exceptions import DriverHasFreightsError, FreightBoardError, RecordNotFoundError, StoreError
from .logging import configure_logging

__all__ = [
    "ConfigManager",
    "PricingConfig",
    "get_config",
    "configure_logging",
    "FreightBoardError",
    "StoreError",
    "RecordNotFoundError",
    "DriverHasFreightsError",
]
