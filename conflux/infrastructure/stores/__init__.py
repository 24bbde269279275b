"""
Configuration stores and the registry selecting them by store type.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ...core.exceptions import ConfigurationError
from ...core.interfaces.stores import IConfigStore
from ..processors import ProcessorRegistry, create_default_processor_registry
from .file_store import FileConfigStore, JsonConfigStore
from .env_store import EnvironmentConfigStore
from .http_store import HttpConfigStore
from .directory_store import DirectoryConfigStore, parse_filesets

logger = logging.getLogger(__name__)

StoreFactory = Callable[[Dict[str, Any], ProcessorRegistry], IConfigStore]


class StoreRegistry:
    """Maps store types to store factories."""

    def __init__(self) -> None:
        self._factories: Dict[str, StoreFactory] = {}

    def register(self, store_type: str, factory: StoreFactory) -> None:
        """
        Register a store factory.

        Args:
            store_type: Type name used in store options
            factory: Callable receiving the store config and the processor
                registry, returning a store
        """
        if store_type in self._factories:
            logger.warning(f"Replacing store factory for type '{store_type}'")
        self._factories[store_type] = factory

    def create(
        self,
        store_type: str,
        config: Optional[Dict[str, Any]] = None,
        processors: Optional[ProcessorRegistry] = None
    ) -> IConfigStore:
        """
        Create a store.

        Raises:
            ConfigurationError: If the type is unknown or the config invalid
        """
        factory = self._factories.get(store_type)
        if factory is None:
            raise ConfigurationError(
                f"Unknown configuration store type: {store_type}",
                {'available': self.names()}
            )

        try:
            return factory(dict(config or {}), processors or create_default_processor_registry())
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration for store '{store_type}': {e}") from e

    def names(self) -> List[str]:
        return sorted(self._factories)


def _create_directory_store(config: Dict[str, Any], processors: ProcessorRegistry) -> IConfigStore:
    filesets = [
        (fileset['pattern'], processors.create(fileset['format'], config))
        for fileset in parse_filesets(config)
    ]
    return DirectoryConfigStore(config.get('path', ''), filesets)


def create_default_store_registry() -> StoreRegistry:
    """Create a registry populated with the built-in store types."""
    registry = StoreRegistry()
    registry.register("file", lambda config, _: FileConfigStore.from_config(config))
    registry.register("json", lambda config, _: JsonConfigStore.from_config(config))
    registry.register("env", lambda config, _: EnvironmentConfigStore.from_config(config))
    registry.register("http", lambda config, _: HttpConfigStore.from_config(config))
    registry.register("directory", _create_directory_store)
    return registry


__all__ = [
    "FileConfigStore",
    "JsonConfigStore",
    "EnvironmentConfigStore",
    "HttpConfigStore",
    "DirectoryConfigStore",
    "StoreRegistry",
    "create_default_store_registry",
]
