"""
Store and processor interfaces.

A store produces a raw configuration blob on demand; a processor decodes
such a blob into a document. The engine only depends on these contracts,
concrete backends and formats are selected when the engine is built.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

from ..domain.documents import Document


class IConfigStore(ABC):
    """Interface for configuration stores."""

    @abstractmethod
    async def get(self) -> bytes:
        """
        Retrieve the raw configuration.

        Returns:
            Raw configuration bytes

        Raises:
            Exception: If the configuration cannot be retrieved
        """
        pass

    async def close(self) -> None:
        """Release resources held by the store."""
        return None


class IConfigProcessor(ABC):
    """Interface for configuration format processors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the format name handled by this processor."""
        pass

    @abstractmethod
    async def process(self, data: bytes, document: Document) -> Document:
        """
        Decode raw bytes and merge the result into a document.

        Must be deterministic for identical inputs.

        Args:
            data: Raw configuration bytes
            document: Working document to merge into

        Returns:
            Updated document

        Raises:
            Exception: If the data is malformed
        """
        pass


@dataclass(frozen=True)
class StoreDescriptor:
    """
    A configured store: backend, processor and per-store options.

    The position of a descriptor in the engine's store list defines its
    merge precedence; later stores overwrite earlier ones.
    """

    name: str
    store: IConfigStore
    processor: IConfigProcessor
    optional: bool = False
    options: Dict[str, Any] = field(default_factory=dict)
