"""
Conflux - multi-store configuration aggregation with change notification.

This package merges configuration fragments from an ordered list of stores
into one document, rescans the stores periodically and notifies listeners
whenever the effective configuration changes.
"""

__version__ = "0.1.0"

from .core.interfaces.lifecycle import IStartable, IStoppable, IHealthCheckable, IComponent
from .core.interfaces.stores import IConfigStore, IConfigProcessor, StoreDescriptor
from .core.interfaces.retriever import IConfigRetriever
from .core.domain.snapshot import ChangeEvent, EngineState, Snapshot
from .core.services.retriever import ConfigRetriever
from .core.services.merger import merge
from .core.exceptions import (
    ConfluxError,
    ConfigurationError,
    FetchError,
    DecodeError,
    TransformError,
    EngineClosedError,
    ScanInProgressError,
)
from .application.builder import build_retriever
from .infrastructure.config.models import RetrieverOptions, StoreOptions

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
    "merge",
    "ConfluxError",
    "ConfigurationError",
    "FetchError",
    "DecodeError",
    "TransformError",
    "EngineClosedError",
    "ScanInProgressError",
    "build_retriever",
    "RetrieverOptions",
    "StoreOptions",
]
