"""
Core utilities for Warden.

This package provides shared functionality including logging configuration,
monitoring, database setup and the API models.
"""

from warden.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
