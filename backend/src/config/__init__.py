"""
Configuration module for the EODSA results engine.

Provides centralized configuration for:
- Application settings (token signing, CORS, schema bootstrap)
- Fee schedule tables
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
