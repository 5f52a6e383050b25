"""
Signal component: a small publish/subscribe primitive for asyncio code.

Listeners are called synchronously, in connection order, every time the
signal fires. Coroutine listeners are scheduled as tasks on the running loop.
A coroutine may also ``await signal.wait()`` to resume once on the next fire.
Failures in one listener are logged and never stop the others.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional, Set

from async_task_scheduler.domain.signal import ConnectionInterface, SignalInterface
from async_task_scheduler.exceptions import InvalidCallbackError

logger = logging.getLogger(__name__)


class Connection(ConnectionInterface):
    """A listener connected to a Signal."""

    def __init__(self, signal: "Signal", listener: Callable[..., Any]) -> None:
        self._signal = signal
        self._listener = listener
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def listener(self) -> Callable[..., Any]:
        return self._listener

    def disconnect(self) -> None:
        """Detach the listener. Safe to call more than once."""
        if not self._connected:
            return
        self._connected = False
        self._signal._remove(self)

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<Connection {self._signal.name} {state}>"


class Signal(SignalInterface):
    """
    Fires events to connected listeners and to coroutines waiting on it.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        """Initialize the Signal."""
        self.name = name or "signal"
        self._connections: List[Connection] = []
        self._waiters: List[asyncio.Future] = []
        self._tasks: Set[asyncio.Task] = set()

    def connect(self, listener: Callable[..., Any]) -> Connection:
        """
        Register a listener.

        Args:
            listener: Function or coroutine function called with the fired arguments

        Returns:
            Connection used to detach the listener

        Raises:
            InvalidCallbackError: If the listener is not callable
        """
        if not callable(listener):
            raise InvalidCallbackError(f"Listener for {self.name} must be callable, got {listener!r}")
        connection = Connection(self, listener)
        self._connections.append(connection)
        return connection

    def fire(self, *args: Any) -> None:
        """Call every connected listener, then release pending waiters."""
        for connection in list(self._connections):
            # an earlier listener may have disconnected this one
            if connection.connected:
                self._invoke(connection.listener, args)

        waiters, self._waiters = self._waiters, []
        if not waiters:
            return
        value = args[0] if len(args) == 1 else (args or None)
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(value)

    async def wait(self) -> Any:
        """
        Suspend until the next fire().

        The waiter is registered as soon as the coroutine starts running,
        so a fire scheduled for a later loop turn is never missed.

        Returns:
            The single fired argument, a tuple for several, or None for none
        """
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            return await waiter
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def destroy(self) -> None:
        """Disconnect all listeners, cancel waiters and running listener tasks."""
        for connection in list(self._connections):
            connection.disconnect()
        for waiter in self._waiters:
            waiter.cancel()
        self._waiters.clear()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._connections)

    def _remove(self, connection: Connection) -> None:
        if connection in self._connections:
            self._connections.remove(connection)

    def _invoke(self, listener: Callable[..., Any], args: tuple) -> None:
        try:
            result = listener(*args)
        except Exception as e:
            logger.error(f"Listener {listener!r} of {self.name} failed: {e}", exc_info=e)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Listener task of {self.name} failed: {error}", exc_info=error)
