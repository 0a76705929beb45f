"""
Utility modules for the EODSA results engine backend.

This package contains shared utilities used across the application:
- logging_config: Structured logging for the api, services and db layers
"""

from backend.src.utils.logging_config import get_logger, init_logging

__all__ = [
    "get_logger",
    "init_logging",
]
