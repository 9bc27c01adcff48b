"""
Favorite Places — State Cell, Error Channel & Scope Tests
==========================================================

What we test:
    ✅ Observers fire on change only, in order, and can unsubscribe
    ✅ Read-only views expose no setter
    ✅ Error channel keeps a single, clearable message
    ✅ Scope cancels in-flight calls and discards late results
"""

import asyncio

import pytest

from favplaces.client.errors import ErrorChannel
from favplaces.client.scope import Scope
from favplaces.client.state import StateCell


class TestStateCell:
    """Tests for StateCell notification and read-only views."""

    def test_notifies_on_change_only(self):
        """Setting an equal value notifies nobody."""
        cell = StateCell(0)
        seen = []
        cell.subscribe(seen.append)

        cell.set(1)
        cell.set(1)
        cell.set(2)

        assert seen == [1, 2]

    def test_unsubscribe_is_idempotent(self):
        """A second unsubscribe is harmless."""
        cell = StateCell("a")
        seen = []
        subscription = cell.subscribe(seen.append)

        subscription.unsubscribe()
        subscription.unsubscribe()
        cell.set("b")

        assert seen == []

    def test_readonly_view_tracks_owner(self):
        """The view sees owner updates and has no setter."""
        cell = StateCell(())
        view = cell.as_readonly()
        seen = []
        view.subscribe(seen.append)

        cell.set(("p1",))

        assert view.value == ("p1",)
        assert seen == [("p1",)]
        assert not hasattr(view, "set")

    def test_observer_may_unsubscribe_while_notified(self):
        """Unsubscribing from inside a callback does not skip other observers."""
        cell = StateCell(0)
        seen = []
        subscription = None

        def once(value):
            seen.append(value)
            subscription.unsubscribe()

        subscription = cell.subscribe(once)
        cell.subscribe(lambda v: seen.append(v * 10))
        cell.set(1)
        cell.set(2)

        assert seen == [1, 10, 20]


class TestErrorChannel:
    """Tests for the single-slot error channel."""

    def test_latest_report_wins(self):
        """A new report replaces the previous message."""
        channel = ErrorChannel()
        channel.report("first")
        channel.report("second")
        assert channel.message.value == "second"

    def test_clear(self):
        """clear() empties the slot and notifies observers."""
        channel = ErrorChannel()
        seen = []
        channel.message.subscribe(seen.append)

        channel.report("boom")
        channel.clear()

        assert channel.message.value is None
        assert seen == ["boom", None]


class TestScope:
    """Tests for lifetime-bound cancellation."""

    @pytest.mark.asyncio
    async def test_run_returns_result(self):
        """An open scope passes the result through and forgets the task."""
        async def answer():
            return 42

        async with Scope() as scope:
            assert await scope.run(answer()) == 42
            assert scope.pending == 0

    @pytest.mark.asyncio
    async def test_close_cancels_in_flight_call(self):
        """close() cancels a call that is still waiting."""
        scope = Scope()
        gate = asyncio.Event()

        async def slow():
            await gate.wait()
            return "late"

        runner = asyncio.ensure_future(scope.run(slow()))
        await asyncio.sleep(0)
        assert scope.pending == 1

        scope.close()
        with pytest.raises(asyncio.CancelledError):
            await runner

    @pytest.mark.asyncio
    async def test_result_arriving_after_close_is_discarded(self):
        """A result delivered just before close never reaches the caller."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        scope = Scope()

        runner = asyncio.ensure_future(scope.run(future))
        await asyncio.sleep(0)

        future.set_result("late")
        scope.close()

        with pytest.raises(asyncio.CancelledError):
            await runner

    @pytest.mark.asyncio
    async def test_error_arriving_after_close_is_discarded(self):
        """A failure delivered just before close is swallowed into cancellation."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        scope = Scope()

        runner = asyncio.ensure_future(scope.run(future))
        await asyncio.sleep(0)

        future.set_exception(ValueError("late failure"))
        scope.close()

        with pytest.raises(asyncio.CancelledError):
            await runner

    @pytest.mark.asyncio
    async def test_run_after_close_raises(self):
        """Nothing can be started on a closed scope."""
        scope = Scope()
        scope.close()

        async def never():
            raise AssertionError("should not start")

        with pytest.raises(RuntimeError):
            await scope.run(never())

    @pytest.mark.asyncio
    async def test_finalizers_run_once(self):
        """Finalizers run on the first close only."""
        calls = []
        scope = Scope()
        scope.add_finalizer(lambda: calls.append("done"))

        await scope.aclose()
        scope.close()

        assert calls == ["done"]
        assert scope.closed
