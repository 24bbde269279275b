"""
Infrastructure layer: option loading, logging, stores and format processors.
"""

from .config import ConfigLoader, RetrieverOptions, StoreOptions, LoggingConfig
from .logging import setup_logging, LoggingManager
from .stores import StoreRegistry, create_default_store_registry
from .processors import ProcessorRegistry, create_default_processor_registry

__all__ = [
    "ConfigLoader",
    "RetrieverOptions",
    "StoreOptions",
    "LoggingConfig",
    "setup_logging",
    "LoggingManager",
    "StoreRegistry",
    "create_default_store_registry",
    "ProcessorRegistry",
    "create_default_processor_registry",
]
