"""
Scan orchestration.

A scan fetches every configured store, decodes each blob with its
processor, merges the results in store order, applies the optional
configuration processor and hands the result to the change broadcaster.
At most one scan is in flight at any instant.
"""

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..domain.documents import Document, empty_document, is_document
from ..domain.snapshot import EngineState, ScanTrigger
from ..exceptions import (
    DecodeError,
    EngineClosedError,
    FetchError,
    ScanInProgressError,
    TransformError,
)
from ..interfaces.retriever import ConfigurationProcessor
from ..interfaces.stores import StoreDescriptor
from .broadcaster import ChangeBroadcaster
from .merger import merge

logger = logging.getLogger(__name__)


class Scanner:
    """
    Runs fetch-merge-diff cycles over an ordered list of stores.

    Manual scans raise on failure so the caller never receives a partial
    configuration. Scheduled scans swallow failures and leave the current
    snapshot untouched.
    """

    def __init__(
        self,
        stores: Sequence[StoreDescriptor],
        broadcaster: ChangeBroadcaster
    ) -> None:
        self._stores = tuple(stores)
        self._broadcaster = broadcaster
        self._state = EngineState.IDLE
        self._state_lock = threading.Lock()

        self._configuration_processor: Optional[ConfigurationProcessor] = None
        self._before_scan_handler: Optional[Callable[[], Any]] = None
        self._scan_error_handler: Optional[Callable[[Exception], Any]] = None

        self._metrics: Dict[str, Any] = {
            'scans_started': 0,
            'scans_succeeded': 0,
            'scans_failed': 0,
            'scans_skipped': 0,
            'last_scan_duration': None,
            'last_scan_time': None,
            'last_error': None,
        }

    @property
    def state(self) -> EngineState:
        """Get the current engine state."""
        return self._state

    @property
    def stores(self) -> Sequence[StoreDescriptor]:
        return self._stores

    def set_configuration_processor(self, processor: Optional[ConfigurationProcessor]) -> None:
        self._configuration_processor = processor

    def set_before_scan_handler(self, handler: Optional[Callable[[], Any]]) -> None:
        self._before_scan_handler = handler

    def set_scan_error_handler(self, handler: Optional[Callable[[Exception], Any]]) -> None:
        self._scan_error_handler = handler

    def _try_begin(self) -> Optional[EngineState]:
        """Atomically move IDLE -> SCANNING; returns the blocking state on failure."""
        with self._state_lock:
            if self._state is not EngineState.IDLE:
                return self._state
            self._state = EngineState.SCANNING
            return None

    def _end(self) -> None:
        with self._state_lock:
            if self._state is EngineState.SCANNING:
                self._state = EngineState.IDLE

    def close(self) -> None:
        """Move to CLOSED; an in-flight scan finishes but never publishes."""
        with self._state_lock:
            self._state = EngineState.CLOSED

    async def run_scan(self, trigger: ScanTrigger = ScanTrigger.MANUAL) -> Optional[Document]:
        """
        Run one scan cycle.

        Args:
            trigger: MANUAL for caller-awaited scans, SCHEDULED for timer ticks

        Returns:
            The merged configuration, or None when a scheduled scan was
            skipped, failed or was discarded because the engine closed

        Raises:
            ScanInProgressError: Manual scan while another scan is in flight
            EngineClosedError: Manual scan after close
            FetchError, DecodeError, TransformError: Manual scan failures
        """
        blocking = self._try_begin()
        if blocking is not None:
            if trigger is ScanTrigger.SCHEDULED:
                self._metrics['scans_skipped'] += 1
                logger.debug(f"Skipping scheduled scan, engine is {blocking.value}")
                return None
            if blocking is EngineState.CLOSED:
                raise EngineClosedError()
            raise ScanInProgressError()

        self._metrics['scans_started'] += 1
        start_time = time.time()

        try:
            self._notify_before_scan()
            document = await self._compute()

            if self._state is EngineState.CLOSED:
                logger.info("Retriever closed during scan, discarding result")
                raise EngineClosedError()

            await self._broadcaster.publish(document)

            self._metrics['scans_succeeded'] += 1
            self._metrics['last_error'] = None
            return document

        except EngineClosedError:
            if trigger is ScanTrigger.MANUAL:
                raise
            return None

        except Exception as e:
            self._metrics['scans_failed'] += 1
            self._metrics['last_error'] = str(e)

            if trigger is ScanTrigger.MANUAL:
                logger.error(f"Configuration scan failed: {e}")
                raise

            logger.warning(f"Scheduled configuration scan failed, keeping current configuration: {e}")
            self._notify_scan_error(e)
            return None

        finally:
            self._metrics['last_scan_duration'] = time.time() - start_time
            self._metrics['last_scan_time'] = time.time()
            self._end()

    async def _compute(self) -> Document:
        """Fetch, decode, merge and transform; raises the first store failure."""
        results = await asyncio.gather(
            *(self._load_store(descriptor) for descriptor in self._stores),
            return_exceptions=True
        )

        documents: List[Document] = []
        for descriptor, result in zip(self._stores, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                if descriptor.optional:
                    logger.warning(
                        f"Optional store '{descriptor.name}' failed, using empty configuration: {result}")
                    documents.append(empty_document())
                    continue
                raise result
            documents.append(result)

        merged = empty_document()
        for index, document in enumerate(documents):
            merged = merge(merged, index, document)

        if self._configuration_processor is not None:
            try:
                merged = self._configuration_processor(merged)
            except Exception as e:
                raise TransformError(e) from e

            if not is_document(merged):
                raise TransformError(TypeError(
                    f"Configuration processor must return a document, got {type(merged).__name__}"))

        return merged

    async def _load_store(self, descriptor: StoreDescriptor) -> Document:
        """Fetch one store and decode its content."""
        try:
            data = await descriptor.store.get()
        except Exception as e:
            raise FetchError(descriptor.name, e) from e

        try:
            return await descriptor.processor.process(data, empty_document())
        except Exception as e:
            raise DecodeError(descriptor.name, e) from e

    def _notify_before_scan(self) -> None:
        if self._before_scan_handler is None:
            return
        try:
            result = self._before_scan_handler()
            if asyncio.iscoroutine(result):
                asyncio.ensure_future(result)
        except Exception as e:
            logger.error(f"Error in before-scan handler: {e}")

    def _notify_scan_error(self, error: Exception) -> None:
        if self._scan_error_handler is None:
            return
        try:
            result = self._scan_error_handler(error)
            if asyncio.iscoroutine(result):
                asyncio.ensure_future(result)
        except Exception as e:
            logger.error(f"Error in scan error handler: {e}")

    def get_metrics(self) -> Dict[str, Any]:
        """Get scanner metrics."""
        return {**self._metrics, 'state': self._state.value, 'stores': len(self._stores)}
