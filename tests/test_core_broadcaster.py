"""
Tests for the change broadcaster.

This module tests snapshot versioning, change detection, listener
dispatch and isolation, and behaviour after close.
"""

import asyncio
import pytest
from typing import List
from unittest.mock import Mock

from conflux.core.domain.snapshot import ChangeEvent
from conflux.core.exceptions import EngineClosedError
from conflux.core.services.broadcaster import ChangeBroadcaster


class TestChangeBroadcaster:
    """Test cases for ChangeBroadcaster."""

    @pytest.fixture
    def broadcaster(self) -> ChangeBroadcaster:
        return ChangeBroadcaster()

    def test_initial_snapshot(self, broadcaster: ChangeBroadcaster) -> None:
        """Test the initial snapshot is empty, version 0 and unpublished."""
        snapshot = broadcaster.snapshot

        assert snapshot.document == {}
        assert snapshot.version == 0
        assert snapshot.published is False

    @pytest.mark.asyncio
    async def test_first_publish_sets_snapshot_without_event(self, broadcaster: ChangeBroadcaster) -> None:
        """Test the first publication never produces a change event."""
        listener = Mock()
        broadcaster.listen(listener)

        event = await broadcaster.publish({"key": "value"})

        assert event is None
        listener.assert_not_called()
        assert broadcaster.snapshot.document == {"key": "value"}
        assert broadcaster.snapshot.version == 1
        assert broadcaster.snapshot.published is True

    @pytest.mark.asyncio
    async def test_first_publish_of_empty_document(self, broadcaster: ChangeBroadcaster) -> None:
        """Test an empty first document still counts as published."""
        await broadcaster.publish({})

        assert broadcaster.snapshot.published is True
        assert broadcaster.snapshot.version == 1

    @pytest.mark.asyncio
    async def test_identical_publish_is_noop(self, broadcaster: ChangeBroadcaster) -> None:
        """Test republishing an equal document neither notifies nor bumps the version."""
        listener = Mock()
        await broadcaster.publish({"a": 1, "b": {"c": [1, 2]}})
        broadcaster.listen(listener)

        event = await broadcaster.publish({"b": {"c": [1, 2]}, "a": 1})

        assert event is None
        listener.assert_not_called()
        assert broadcaster.snapshot.version == 1

    @pytest.mark.asyncio
    async def test_change_notifies_with_previous_and_new(self, broadcaster: ChangeBroadcaster) -> None:
        """Test a changed document swaps the snapshot and notifies listeners."""
        received: List[ChangeEvent] = []
        await broadcaster.publish({"k": "v1"})
        broadcaster.listen(received.append)

        event = await broadcaster.publish({"k": "v2"})

        assert event is not None
        assert event.previous == {"k": "v1"}
        assert event.new == {"k": "v2"}
        assert event.version == 2
        assert received == [event]
        assert broadcaster.snapshot.version == 2

    @pytest.mark.asyncio
    async def test_async_listener_is_awaited(self, broadcaster: ChangeBroadcaster) -> None:
        """Test coroutine listeners complete before publish returns."""
        received: List[ChangeEvent] = []

        async def listener(event: ChangeEvent) -> None:
            await asyncio.sleep(0)
            received.append(event)

        await broadcaster.publish({"k": 1})
        broadcaster.listen(listener)
        await broadcaster.publish({"k": 2})

        assert len(received) == 1
        assert received[0].new == {"k": 2}

    @pytest.mark.asyncio
    async def test_failing_listener_is_isolated(self, broadcaster: ChangeBroadcaster) -> None:
        """Test one failing listener neither stops the others nor corrupts the snapshot."""
        def failing(event: ChangeEvent) -> None:
            raise RuntimeError("listener failure")

        healthy = Mock()
        await broadcaster.publish({"k": 1})
        broadcaster.listen(failing)
        broadcaster.listen(healthy)

        event = await broadcaster.publish({"k": 2})

        healthy.assert_called_once_with(event)
        assert broadcaster.snapshot.document == {"k": 2}
        assert broadcaster.get_metrics()['listener_errors'] == 1

    @pytest.mark.asyncio
    async def test_late_listener_receives_only_next_change(self, broadcaster: ChangeBroadcaster) -> None:
        """Test a listener registered after scan N only sees scan N+1."""
        await broadcaster.publish({"k": 1})
        await broadcaster.publish({"k": 2})

        late = Mock()
        broadcaster.listen(late)
        await broadcaster.publish({"k": 3})

        late.assert_called_once()
        event = late.call_args[0][0]
        assert event.previous == {"k": 2}
        assert event.new == {"k": 3}

    @pytest.mark.asyncio
    async def test_listener_added_during_dispatch_misses_current_event(
        self, broadcaster: ChangeBroadcaster
    ) -> None:
        """Test the dispatch iterates the registry copy taken at swap time."""
        added = Mock()

        def registering(event: ChangeEvent) -> None:
            broadcaster.listen(added)

        await broadcaster.publish({"k": 1})
        broadcaster.listen(registering)
        await broadcaster.publish({"k": 2})

        added.assert_not_called()

        await broadcaster.publish({"k": 3})
        added.assert_called_once()

    @pytest.mark.asyncio
    async def test_unlisten(self, broadcaster: ChangeBroadcaster) -> None:
        """Test removed listeners are not notified."""
        listener = Mock()
        await broadcaster.publish({"k": 1})
        subscription_id = broadcaster.listen(listener)

        assert broadcaster.unlisten(subscription_id) is True
        assert broadcaster.unlisten(subscription_id) is False

        await broadcaster.publish({"k": 2})
        listener.assert_not_called()

    def test_listen_requires_callable(self, broadcaster: ChangeBroadcaster) -> None:
        with pytest.raises(TypeError):
            broadcaster.listen("not callable")  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_republishing_nan_is_noop(self, broadcaster: ChangeBroadcaster) -> None:
        """Test a document holding NaN is equal to itself on the next scan."""
        listener = Mock()
        await broadcaster.publish({"x": float("nan")})
        broadcaster.listen(listener)

        assert await broadcaster.publish({"x": float("nan")}) is None
        listener.assert_not_called()
        assert broadcaster.snapshot.version == 1

    @pytest.mark.asyncio
    async def test_each_listener_gets_its_own_documents(self, broadcaster: ChangeBroadcaster) -> None:
        """Test a listener mutating its event cannot affect later listeners."""
        seen: List[ChangeEvent] = []

        def mutating(event: ChangeEvent) -> None:
            event.new["k"] = "mutated"
            event.previous.clear()

        await broadcaster.publish({"k": 1})
        broadcaster.listen(mutating)
        broadcaster.listen(seen.append)
        event = await broadcaster.publish({"k": 2})

        assert seen[0].new == {"k": 2}
        assert seen[0].previous == {"k": 1}
        assert event is not None and event.new == {"k": 2}

    @pytest.mark.asyncio
    async def test_event_documents_do_not_alias_snapshot(self, broadcaster: ChangeBroadcaster) -> None:
        """Test listeners mutating event documents cannot alter the snapshot."""
        def mutating(event: ChangeEvent) -> None:
            event.new["k"]["nested"] = "mutated"

        await broadcaster.publish({"k": {"nested": 1}})
        broadcaster.listen(mutating)
        await broadcaster.publish({"k": {"nested": 2}})

        assert broadcaster.snapshot.document == {"k": {"nested": 2}}

    @pytest.mark.asyncio
    async def test_snapshot_document_is_a_copy(self, broadcaster: ChangeBroadcaster) -> None:
        await broadcaster.publish({"k": [1]})

        document = broadcaster.snapshot.document
        document["k"].append(2)

        assert broadcaster.snapshot.document == {"k": [1]}

    @pytest.mark.asyncio
    async def test_close_releases_state(self, broadcaster: ChangeBroadcaster) -> None:
        """Test operations after close fail with EngineClosedError."""
        subscription_id = broadcaster.listen(Mock())
        await broadcaster.publish({"k": 1})

        broadcaster.close()
        broadcaster.close()

        assert broadcaster.closed is True
        assert broadcaster.listener_count == 0
        assert broadcaster.unlisten(subscription_id) is False
        with pytest.raises(EngineClosedError):
            await broadcaster.publish({"k": 2})
        with pytest.raises(EngineClosedError):
            broadcaster.listen(Mock())
        with pytest.raises(EngineClosedError):
            _ = broadcaster.snapshot
