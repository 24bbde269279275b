"""
Change broadcaster: snapshot ownership and listener registry.

The broadcaster compares every scanned document with the current snapshot,
swaps the snapshot when the effective configuration changed and notifies
registered listeners with the previous and new documents.
"""

import asyncio
import logging
import threading
import time
import uuid
from dataclasses import replace
from typing import Any, Dict, List, Optional

from ..domain.documents import Document, copy_document, documents_equal
from ..domain.snapshot import ChangeEvent, Snapshot
from ..exceptions import EngineClosedError
from ..interfaces.retriever import Listener

logger = logging.getLogger(__name__)


class ListenerSubscription:
    """Represents a change listener subscription."""

    def __init__(self, subscription_id: str, listener: Listener):
        self.subscription_id = subscription_id
        self.listener = listener
        self.created_at = time.time()
        self.call_count = 0
        self.last_called: Optional[float] = None
        self.error_count = 0

    @property
    def listener_name(self) -> str:
        return getattr(self.listener, '__name__', repr(self.listener))


class ChangeBroadcaster:
    """
    Owns the current snapshot and dispatches change events.

    The snapshot swap and the copy of the listener list are taken together
    under one lock; listeners run afterwards, outside the lock, so listener
    code can call back into the broadcaster.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = Snapshot.initial()
        self._subscriptions: Dict[str, ListenerSubscription] = {}
        self._closed = False
        self._metrics: Dict[str, Any] = {
            'changes_published': 0,
            'unchanged_scans': 0,
            'listener_calls': 0,
            'listener_errors': 0,
        }

    @property
    def snapshot(self) -> Snapshot:
        """Get the current snapshot."""
        with self._lock:
            if self._closed:
                raise EngineClosedError()
            return self._snapshot

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def listen(self, listener: Listener) -> str:
        """
        Register a change listener.

        A listener only receives events published after registration; no
        synthetic event is produced for the current snapshot.

        Args:
            listener: Sync or async callable receiving ChangeEvent objects

        Returns:
            Subscription ID
        """
        if not callable(listener):
            raise TypeError("Listener must be callable")

        subscription_id = str(uuid.uuid4())
        with self._lock:
            if self._closed:
                raise EngineClosedError()
            self._subscriptions[subscription_id] = ListenerSubscription(subscription_id, listener)

        logger.debug(f"Registered configuration listener (ID: {subscription_id})")
        return subscription_id

    def unlisten(self, subscription_id: str) -> bool:
        """
        Remove a change listener.

        Args:
            subscription_id: ID returned from listen()

        Returns:
            True if the listener was registered
        """
        with self._lock:
            removed = self._subscriptions.pop(subscription_id, None)

        if removed:
            logger.debug(f"Removed configuration listener (ID: {subscription_id})")
        return removed is not None

    async def publish(self, document: Document) -> Optional[ChangeEvent]:
        """
        Publish a freshly scanned document.

        Args:
            document: Fully merged configuration document

        Returns:
            The change event delivered to listeners, or None when the
            configuration did not change or this is the first publication
        """
        with self._lock:
            if self._closed:
                raise EngineClosedError()

            previous = self._snapshot
            if previous.published and documents_equal(previous.document, document):
                self._metrics['unchanged_scans'] += 1
                logger.debug(f"Configuration unchanged (version {previous.version})")
                return None

            current = Snapshot.of(document, previous.version + 1)
            self._snapshot = current

            if not previous.published:
                logger.info(f"Initial configuration published (version {current.version})")
                return None

            subscriptions = list(self._subscriptions.values())
            self._metrics['changes_published'] += 1

        event = ChangeEvent(
            previous=previous.document,
            new=current.document,
            version=current.version
        )
        logger.info(
            f"Configuration changed (version {previous.version} -> {current.version}), "
            f"notifying {len(subscriptions)} listener(s)"
        )
        await self._dispatch(event, subscriptions)
        return event

    async def _dispatch(self, event: ChangeEvent, subscriptions: List[ListenerSubscription]) -> None:
        """
        Invoke every listener, isolating failures per listener.

        Each listener receives its own copy of the documents, so a listener
        mutating its event cannot affect the listeners after it.
        """
        for subscription in subscriptions:
            try:
                result = subscription.listener(replace(
                    event,
                    previous=copy_document(event.previous),
                    new=copy_document(event.new)
                ))
                if asyncio.iscoroutine(result):
                    await result

                subscription.call_count += 1
                subscription.last_called = time.time()
                self._metrics['listener_calls'] += 1

            except Exception as e:
                subscription.error_count += 1
                self._metrics['listener_errors'] += 1
                logger.error(f"Error in configuration listener {subscription.listener_name}: {e}")

    def get_metrics(self) -> Dict[str, Any]:
        """Get broadcaster metrics."""
        with self._lock:
            return {
                **self._metrics,
                'listeners': len(self._subscriptions),
                'version': self._snapshot.version,
            }

    def close(self) -> None:
        """Release the snapshot and listener registry. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._subscriptions.clear()
            self._snapshot = Snapshot.initial()
        logger.debug("Change broadcaster closed")
