"""
Core module containing the scan / merge / diff / broadcast engine.

This module is independent of concrete stores, formats and frameworks; it
only orchestrates fetch, merge, diff and notify over the interfaces defined
in core.interfaces.
"""

from .interfaces.lifecycle import IStartable, IStoppable, IHealthCheckable, IComponent
from .interfaces.stores import IConfigStore, IConfigProcessor, StoreDescriptor
from .interfaces.retriever import IConfigRetriever
from .domain.snapshot import ChangeEvent, EngineState, Snapshot
from .services.retriever import ConfigRetriever
from .exceptions import (
    ConfluxError,
    ConfigurationError,
    FetchError,
    DecodeError,
    TransformError,
    EngineClosedError,
    ScanInProgressError,
)

__all__ = [
    "IStartable",
    "IStoppable",
    "IHealthCheckable",
    "IComponent",
    "IConfigStore",
    "IConfigProcessor",
    "StoreDescriptor",
    "IConfigRetriever",
    "ChangeEvent",
    "EngineState",
    "Snapshot",
    "ConfigRetriever",
    "ConfluxError",
    "ConfigurationError",
    "FetchError",
    "DecodeError",
    "TransformError",
    "EngineClosedError",
    "ScanInProgressError",
]
