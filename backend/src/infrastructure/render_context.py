"""
Execution-context boundary for the render backend.

Some backends must be started from one specific event loop (for example a
loop owned by a host bridge thread). :class:`RenderContext` marshals a
coroutine onto that loop and hands the result back to the caller's loop.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RenderContext:
    """Runs render coroutines on a bound loop, or inline when unbound."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    def bind(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        self._loop = loop

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Await ``factory()`` on the render loop.

        Cancelling the caller cancels the remote task and waits for it to
        finish its own cleanup before ``CancelledError`` is re-raised.
        """
        target = self._loop
        if target is None or target is asyncio.get_running_loop():
            return await factory()

        if target.is_closed() or not target.is_running():
            raise RuntimeError("Render context loop is not running")

        remote_tasks: list[asyncio.Task] = []

        async def _remote() -> T:
            remote_tasks.append(asyncio.current_task())
            return await factory()

        logger.debug("Marshalling render call onto bound loop %r", target)
        concurrent_future = asyncio.run_coroutine_threadsafe(_remote(), target)
        wrapped = asyncio.wrap_future(concurrent_future)
        try:
            return await asyncio.shield(wrapped)
        except asyncio.CancelledError:
            if remote_tasks:
                target.call_soon_threadsafe(remote_tasks[0].cancel)
            else:
                concurrent_future.cancel()
            await asyncio.wait([wrapped])
            if not wrapped.cancelled() and wrapped.exception() is not None:
                logger.warning("Render call raised during cancellation: %s", wrapped.exception())
            raise
