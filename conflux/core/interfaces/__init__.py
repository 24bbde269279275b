"""
Core interfaces defining the contracts between the engine and its collaborators.

Stores and processors are plugged into the engine through these interfaces,
so the engine never depends on a concrete backend or format.
"""

from .lifecycle import IStartable, IStoppable, IHealthCheckable, IConfigurable, IComponent
from .stores import IConfigStore, IConfigProcessor, StoreDescriptor
from .retriever import IConfigRetriever, Listener, ConfigurationProcessor

__all__ = [
    "IStartable",
    "IStoppable",
    "IHealthCheckable",
    "IConfigurable",
    "IComponent",
    "IConfigStore",
    "IConfigProcessor",
    "StoreDescriptor",
    "IConfigRetriever",
    "Listener",
    "ConfigurationProcessor",
]
