"""
Logging infrastructure.

This module provides centralized logging configuration.
"""

from .setup import setup_logging, LoggingManager, InterceptHandler

__all__ = [
    "setup_logging",
    "LoggingManager",
    "InterceptHandler",
]
