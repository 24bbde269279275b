"""
Configuration retriever.

Ties the scanner, the change broadcaster and the scan scheduler into one
component that applications start, query, subscribe to and close.
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from ..domain.documents import Document
from ..domain.snapshot import EngineState, SchedulerState, ScanTrigger, Snapshot
from ..exceptions import EngineClosedError
from ..interfaces.lifecycle import IComponent
from ..interfaces.retriever import ConfigurationProcessor, IConfigRetriever, Listener
from ..interfaces.stores import StoreDescriptor
from .broadcaster import ChangeBroadcaster
from .scanner import Scanner
from .scheduler import ScanScheduler

logger = logging.getLogger(__name__)

DEFAULT_SCAN_PERIOD = 5.0


class ConfigRetriever(IComponent, IConfigRetriever):
    """
    Aggregates configuration from an ordered list of stores.

    The retriever keeps the merged configuration fresh by rescanning every
    ``scan_period`` seconds once started, and notifies listeners only when
    the effective configuration changes.

    Example:
        retriever = ConfigRetriever(stores, scan_period=5.0)
        config = await retriever.get_config()
        retriever.listen(lambda change: apply(change.new))
        await retriever.start()
    """

    def __init__(
        self,
        stores: Sequence[StoreDescriptor],
        scan_period: float = DEFAULT_SCAN_PERIOD
    ) -> None:
        self._stores = tuple(stores)
        self._scan_period = scan_period
        self._broadcaster = ChangeBroadcaster()
        self._scanner = Scanner(self._stores, self._broadcaster)
        self._scheduler = ScanScheduler(self._scheduled_scan)
        self._closed = False

    @property
    def name(self) -> str:
        """Get component name."""
        return "ConfigRetriever"

    @property
    def version(self) -> str:
        """Get component version."""
        return "1.0.0"

    @property
    def scan_period(self) -> float:
        return self._scan_period

    @property
    def state(self) -> EngineState:
        """Get the scan pipeline state."""
        return self._scanner.state

    @property
    def stores(self) -> Sequence[StoreDescriptor]:
        return self._stores

    @property
    def snapshot(self) -> Snapshot:
        """Get the current snapshot."""
        self._ensure_open()
        return self._broadcaster.snapshot

    async def start(self) -> None:
        """Start periodic scanning (no-op for ``scan_period <= 0``)."""
        self._ensure_open()
        await self._scheduler.start(self._scan_period)

    async def stop(self) -> None:
        """Stop the retriever; equivalent to close()."""
        await self.close()

    async def configure(self, config: Dict[str, Any]) -> None:
        """
        Reconfigure runtime settings.

        Only ``scan_period`` can change at runtime; the store list is fixed
        for the lifetime of the retriever.

        Args:
            config: Dictionary with an optional 'scan_period' entry
        """
        self._ensure_open()
        if 'scan_period' not in config:
            return

        scan_period = float(config['scan_period'])
        if scan_period == self._scan_period:
            return

        logger.info(f"Updating scan period from {self._scan_period}s to {scan_period}s")
        self._scan_period = scan_period

        if self._scheduler.state is SchedulerState.RUNNING:
            await self._scheduler.stop()
            await self._scheduler.start(scan_period)

    async def check_health(self) -> Dict[str, Any]:
        """Check retriever health."""
        scanner_metrics = self._scanner.get_metrics()
        if self._closed:
            status = 'closed'
        elif self._scheduler.is_running():
            status = 'running'
        else:
            status = 'on-demand' if self._scan_period <= 0 else 'stopped'

        return {
            'healthy': not self._closed and scanner_metrics['last_error'] is None,
            'status': status,
            'details': {
                'state': scanner_metrics['state'],
                'stores': [descriptor.name for descriptor in self._stores],
                'scan_period': self._scan_period,
                'version': None if self._closed else self._broadcaster.snapshot.version,
                'listeners': self._broadcaster.listener_count,
                'last_error': scanner_metrics['last_error'],
            }
        }

    async def get_config(self) -> Document:
        """Run an on-demand scan and return the merged configuration."""
        self._ensure_open()
        # manual scans raise instead of returning None
        return await self._scanner.run_scan(ScanTrigger.MANUAL)  # type: ignore[return-value]

    def get_cached_config(self) -> Document:
        """Get a copy of the last published configuration."""
        self._ensure_open()
        return self._broadcaster.snapshot.document

    def listen(self, listener: Listener) -> str:
        """Subscribe to configuration changes."""
        self._ensure_open()
        return self._broadcaster.listen(listener)

    def unlisten(self, subscription_id: str) -> bool:
        """Remove a configuration change subscription."""
        return self._broadcaster.unlisten(subscription_id)

    def set_configuration_processor(
        self, processor: Optional[ConfigurationProcessor]
    ) -> 'ConfigRetriever':
        """Set the transform applied to every merged configuration."""
        self._scanner.set_configuration_processor(processor)
        return self

    def set_before_scan_handler(
        self, handler: Optional[Callable[[], Any]]
    ) -> 'ConfigRetriever':
        """Set the hook invoked before every scan attempt."""
        self._scanner.set_before_scan_handler(handler)
        return self

    def set_scan_error_handler(
        self, handler: Optional[Callable[[Exception], Any]]
    ) -> 'ConfigRetriever':
        """Set the hook receiving failures of scheduled scans."""
        self._scanner.set_scan_error_handler(handler)
        return self

    def get_metrics(self) -> Dict[str, Any]:
        """Get combined scanner, broadcaster and scheduler metrics."""
        metrics: Dict[str, Any] = {
            'scanner': self._scanner.get_metrics(),
            'scheduler': self._scheduler.get_metrics(),
        }
        if not self._closed:
            metrics['broadcaster'] = self._broadcaster.get_metrics()
        return metrics

    async def close(self) -> None:
        """
        Close the retriever.

        Stops periodic scanning, discards the result of any in-flight scan,
        releases the snapshot and listeners, and closes every store.
        """
        if self._closed:
            return
        self._closed = True

        logger.info("Closing configuration retriever")

        self._scanner.close()
        self._broadcaster.close()
        await self._scheduler.close()

        for descriptor in self._stores:
            try:
                await descriptor.store.close()
            except Exception as e:
                logger.error(f"Error closing store '{descriptor.name}': {e}")

        logger.info("Configuration retriever closed")

    async def _scheduled_scan(self) -> None:
        await self._scanner.run_scan(ScanTrigger.SCHEDULED)

    def _ensure_open(self) -> None:
        if self._closed:
            raise EngineClosedError()

    async def __aenter__(self) -> 'ConfigRetriever':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
