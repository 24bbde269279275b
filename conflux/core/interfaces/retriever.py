"""
Configuration retriever interface.

Defines the contract applications use to read the merged configuration and
subscribe to its changes.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..domain.documents import Document
from ..domain.snapshot import ChangeEvent, Snapshot

Listener = Callable[[ChangeEvent], Any]
ConfigurationProcessor = Callable[[Document], Document]


class IConfigRetriever(ABC):
    """Interface for configuration retrievers."""

    @abstractmethod
    async def get_config(self) -> Document:
        """
        Run an on-demand scan and return the merged configuration.

        Returns:
            Merged configuration document

        Raises:
            FetchError: If a mandatory store failed
            DecodeError: If a store's content could not be decoded
            TransformError: If the configuration processor failed
            ScanInProgressError: If another scan is in flight
            EngineClosedError: If the retriever has been closed
        """
        pass

    @abstractmethod
    def get_cached_config(self) -> Document:
        """Get a copy of the last published configuration."""
        pass

    @property
    @abstractmethod
    def snapshot(self) -> Snapshot:
        """Get the current snapshot."""
        pass

    @abstractmethod
    def listen(self, listener: Listener) -> str:
        """
        Subscribe to configuration changes.

        Args:
            listener: Sync or async callable receiving ChangeEvent objects

        Returns:
            Subscription ID for unlisten()
        """
        pass

    @abstractmethod
    def unlisten(self, subscription_id: str) -> bool:
        """
        Remove a subscription.

        Returns:
            True if the subscription existed
        """
        pass

    @abstractmethod
    def set_configuration_processor(
        self, processor: Optional[ConfigurationProcessor]
    ) -> 'IConfigRetriever':
        """Set the transform applied to every merged configuration."""
        pass

    @abstractmethod
    def set_before_scan_handler(
        self, handler: Optional[Callable[[], Any]]
    ) -> 'IConfigRetriever':
        """Set the hook invoked before every scan attempt."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the retriever. Idempotent."""
        pass
