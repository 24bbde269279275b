"""
Lifecycle management interfaces for engine components.

These interfaces give the retriever, the logging manager and any embedding
application a common way to start, stop, configure and health-check
components.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IStartable(ABC):
    """Interface for components that can be started."""

    @abstractmethod
    async def start(self) -> None:
        """
        Start the component.

        Raises:
            Exception: If the component fails to start.
        """
        pass


class IStoppable(ABC):
    """Interface for components that can be stopped."""

    @abstractmethod
    async def stop(self) -> None:
        """
        Stop the component and release its resources.

        Implementations must tolerate repeated calls.
        """
        pass


class IHealthCheckable(ABC):
    """Interface for components that can report their health status."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health status of the component.

        Returns:
            Dict containing at least:
            - 'healthy': bool indicating if component is healthy
            - 'status': str describing current status
            - 'details': Dict with additional health details

        Example:
            {
                'healthy': True,
                'status': 'running',
                'details': {
                    'version': 3,
                    'stores': 2,
                    'last_error': None
                }
            }
        """
        pass


class IConfigurable(ABC):
    """Interface for components that can be reconfigured at runtime."""

    @abstractmethod
    async def configure(self, config: Dict[str, Any]) -> None:
        """
        Configure the component with the provided configuration.

        Args:
            config: Configuration dictionary

        Raises:
            ValueError: If configuration is invalid
        """
        pass


class IComponent(IStartable, IStoppable, IHealthCheckable, IConfigurable):
    """Base interface combining all lifecycle interfaces."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the component name."""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Get the component version."""
        pass
