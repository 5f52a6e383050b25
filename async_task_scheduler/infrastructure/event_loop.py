"""
EventLoop component that runs the scheduler's background work.
Spawns coroutines, cancels them and defers calls to the next loop turn.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional, TypeVar

import uvloop

logger = logging.getLogger(__name__)
T = TypeVar("T")


def new_event_loop(use_uvloop: bool = True) -> asyncio.AbstractEventLoop:
    """
    Create a fresh event loop.

    Args:
        use_uvloop: Build the loop with uvloop instead of the default asyncio loop

    Returns:
        A new, not yet running, event loop
    """
    if use_uvloop:
        return uvloop.new_event_loop()
    return asyncio.new_event_loop()


class EventLoop:
    """
    Thin wrapper around an asyncio loop.
    Uses the loop it was given, otherwise the loop running at first use.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Initialize the EventLoop."""
        self._loop = loop
        logger.debug("EventLoop initialized")

    def get_loop(self) -> asyncio.AbstractEventLoop:
        """
        Get the loop used for background work.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        if self._loop.is_closed():
            raise RuntimeError("Event loop is closed")
        return self._loop

    def spawn(self, coro: Coroutine[Any, Any, T], name: Optional[str] = None) -> "asyncio.Task[T]":
        """Start a coroutine as an independent task."""
        try:
            loop = self.get_loop()
        except RuntimeError:
            coro.close()
            raise
        task = loop.create_task(coro, name=name)
        logger.debug(f"Spawned task {task.get_name()}")
        return task

    def cancel(self, task: Optional[asyncio.Task]) -> bool:
        """Cancel a task if it is still pending. Returns True if it was cancelled."""
        if task is None or task.done():
            return False
        logger.debug(f"Cancelling task {task.get_name()}")
        return task.cancel()

    def defer(self, callback: Callable[..., Any], *args: Any) -> asyncio.Handle:
        """Run callback after the current turn of the loop."""
        return self.get_loop().call_soon(callback, *args)
