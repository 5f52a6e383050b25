"""
Scheduler domain abstractions.
"""

from typing import Any, Callable, Protocol, runtime_checkable

from async_task_scheduler.domain.policy import Policy
from async_task_scheduler.domain.signal import ConnectionInterface


@runtime_checkable
class SchedulerInterface(Protocol):
    """Protocol defining the single consumer scheduler interface."""

    def change_policy(self, policy: Policy) -> None:
        """Change the order used for the next selection."""
        ...

    def bind_callback(self, callback: Callable[[Any], Any]) -> None:
        """Bind the consumer that receives tasks."""
        ...

    def unbind_callback(self) -> None:
        """Remove the consumer, stopping the scheduler."""
        ...

    def add_predicate(self, predicate: Callable[[Any], bool]) -> None:
        """Filter out tasks for which the predicate returns False."""
        ...

    def remove_predicate(self) -> None:
        """Remove the filter."""
        ...

    def done_handling_task(self) -> None:
        """Notify that the consumer is ready for the next task."""
        ...

    def add_tasks(self, *tasks: Any) -> None:
        """Queue tasks for the consumer."""
        ...

    def get_number_of_tasks(self) -> int:
        """Number of tasks still in queue."""
        ...

    def connect_to_queue_empty(self, callback: Callable[[], Any]) -> ConnectionInterface:
        """Listen for the queue running out of tasks."""
        ...

    def destroy(self) -> None:
        """Halt the scheduler and release its state."""
        ...
