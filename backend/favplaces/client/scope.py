"""
Favorite Places — Consumer Lifetime Scope
==========================================

What:  Ties in-flight network calls to the lifetime of whoever consumes them.
How:   Every call a component makes goes through `Scope.run`, which wraps it
       in a task and remembers it. `close()` cancels the remembered tasks and
       runs the registered finalizers (typically dropping observers).

Contract for code awaiting `run`:
    - closed before the call      → RuntimeError, the coroutine never starts
    - closed while the call waits → asyncio.CancelledError
    - call resolves after close   → asyncio.CancelledError, result discarded

Callers therefore never see a result (or a domain error) once the consumer
is gone, and skip every cache update that would follow it.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLOSED_MESSAGE = "Scope is closed; the consumer has been torn down"


class Scope:
    """A set of cancellable calls plus teardown hooks; usable as an async context manager."""

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()
        self._finalizers: List[Callable[[], None]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(CLOSED_MESSAGE)

    def add_finalizer(self, finalizer: Callable[[], None]) -> None:
        self._finalizers.append(finalizer)

    async def run(self, awaitable: Awaitable[T]) -> T:
        if self._closed:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RuntimeError(CLOSED_MESSAGE)

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        try:
            result = await task
        except Exception:
            if self._closed:
                raise asyncio.CancelledError() from None
            raise

        if self._closed:
            raise asyncio.CancelledError()
        return result

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def close(self) -> None:
        """Cancel in-flight calls and run finalizers. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        if self._tasks:
            logger.debug("Cancelling %d in-flight call(s)", len(self._tasks))
        for task in list(self._tasks):
            task.cancel()
        for finalizer in self._finalizers:
            finalizer()

    async def aclose(self) -> None:
        """Close, then wait for cancelled calls to finish unwinding."""
        pending = list(self._tasks)
        self.close()
        if pending:
            await asyncio.wait(pending)

    async def __aenter__(self) -> "Scope":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
