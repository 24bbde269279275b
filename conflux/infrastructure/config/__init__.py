"""
Retriever options infrastructure.

This module provides option models and the loader reading them from
files and environment variables.
"""

from .models import RetrieverOptions, StoreOptions, LoggingConfig
from .loader import ConfigLoader

__all__ = [
    "RetrieverOptions",
    "StoreOptions",
    "LoggingConfig",
    "ConfigLoader",
]
