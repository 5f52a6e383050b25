"""
Domain interface for the Signal component.
"""

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class ConnectionInterface(Protocol):
    """Handle returned by a signal for a single connected listener."""

    @property
    def connected(self) -> bool:
        """Check if the listener is still connected."""
        ...

    def disconnect(self) -> None:
        """Detach the listener from its signal."""
        ...


@runtime_checkable
class SignalInterface(Protocol):
    """
    Interface for the Signal component.
    Defines the contract that all Signal implementations must follow.
    """

    def connect(self, listener: Callable[..., Any]) -> ConnectionInterface:
        """
        Register a listener.

        Args:
            listener: Callable invoked with the arguments given to fire()

        Returns:
            A connection that can detach the listener again
        """
        ...

    def fire(self, *args: Any) -> None:
        """Invoke every connected listener, in connection order."""
        ...

    async def wait(self) -> Any:
        """Suspend until the next fire() and return its arguments."""
        ...

    def destroy(self) -> None:
        """Disconnect every listener and release pending waiters."""
        ...
