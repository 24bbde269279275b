"""
Format processors and the registry selecting them by format name.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ...core.exceptions import ConfigurationError
from ...core.interfaces.stores import IConfigProcessor
from .base import BaseProcessor
from .json_processor import JsonProcessor
from .yaml_processor import YamlProcessor
from .properties_processor import PropertiesProcessor
from .raw_processor import RawProcessor

logger = logging.getLogger(__name__)

ProcessorFactory = Callable[[Dict[str, Any]], IConfigProcessor]


class ProcessorRegistry:
    """Maps format names to processor factories."""

    def __init__(self) -> None:
        self._factories: Dict[str, ProcessorFactory] = {}

    def register(self, format_name: str, factory: ProcessorFactory) -> None:
        """
        Register a processor factory.

        Args:
            format_name: Format name used in store options
            factory: Callable receiving the store config and returning a processor
        """
        if format_name in self._factories:
            logger.warning(f"Replacing processor for format '{format_name}'")
        self._factories[format_name] = factory

    def create(self, format_name: str, options: Optional[Dict[str, Any]] = None) -> IConfigProcessor:
        """
        Create a processor for a format.

        Raises:
            ConfigurationError: If the format is unknown
        """
        factory = self._factories.get(format_name)
        if factory is None:
            raise ConfigurationError(
                f"Unknown configuration format: {format_name}",
                {'available': self.names()}
            )
        return factory(dict(options or {}))

    def names(self) -> List[str]:
        return sorted(self._factories)


def create_default_processor_registry() -> ProcessorRegistry:
    """Create a registry populated with the built-in formats."""
    registry = ProcessorRegistry()
    registry.register(JsonProcessor.format_name, JsonProcessor)
    registry.register(YamlProcessor.format_name, YamlProcessor)
    registry.register(PropertiesProcessor.format_name, PropertiesProcessor)
    registry.register(RawProcessor.format_name, RawProcessor)
    return registry


__all__ = [
    "BaseProcessor",
    "JsonProcessor",
    "YamlProcessor",
    "PropertiesProcessor",
    "RawProcessor",
    "ProcessorRegistry",
    "create_default_processor_registry",
]
