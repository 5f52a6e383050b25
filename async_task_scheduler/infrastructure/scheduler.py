"""
Scheduler component: a single consumer hand-off queue.

Tasks can be any value. They are passed one at a time to the bound callback,
and the next task is only handed out after the callback's owner calls
done_handling_task(). Producers get backpressure without talking to the
consumer directly.

The order can be changed on the fly with change_policy() (FIFO by default),
and a predicate can drop unwanted tasks right before they would be delivered.
"""

import asyncio
import inspect
import logging
import warnings
from typing import Any, Awaitable, Callable, List, Optional

from async_task_scheduler.domain.policy import Policy, coerce_policy, select_index
from async_task_scheduler.domain.scheduler import SchedulerInterface
from async_task_scheduler.exceptions import (
    AlreadyBoundWarning,
    InvalidCallbackError,
    NoConsumerBoundError,
    SchedulerDestroyedError,
)
from async_task_scheduler.infrastructure.event_loop import EventLoop
from async_task_scheduler.infrastructure.signal import Connection, Signal

logger = logging.getLogger(__name__)

# released without the task reaching a callback; it stays queued
_UNDELIVERED = object()


class Scheduler(SchedulerInterface):
    """
    Hands queued tasks to a single bound callback, one at a time.

    The drain loop is spawned on the first add_tasks() while inactive and
    stops by itself once the queue is empty or the callback was unbound.
    """

    def __init__(
        self,
        policy: Optional[Policy] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        name: Optional[str] = None,
    ) -> None:
        """
        Initialize the Scheduler.

        Args:
            policy: FIFO (default) or LIFO
            loop: Loop for the drain task, defaults to the loop running at first use
            name: Label used in logs and task names
        """
        self._name = name or f"scheduler-{id(self):x}"
        self._policy = Policy.FIFO if policy is None else coerce_policy(policy)
        self._event_loop = EventLoop(loop)

        self._pending: List[Any] = []
        self._predicate: Optional[Callable[[Any], bool]] = None
        self._active = False
        self._binding: Optional[Connection] = None
        self._drain_task: Optional[asyncio.Task] = None
        self._delivery: Optional[asyncio.Handle] = None
        self._deliveries = 0
        self._destroyed = False

        self._new_task_signal = Signal(f"{self._name}.new_task")
        self._handled_task_signal = Signal(f"{self._name}.handled_task")
        self._queue_empty_signal = Signal(f"{self._name}.queue_empty")
        self._idle_signal = Signal(f"{self._name}.idle")
        logger.debug(f"Scheduler {self._name} initialized with {self._policy.value} policy")

    @property
    def name(self) -> str:
        return self._name

    @property
    def policy(self) -> Policy:
        return self._policy

    @property
    def is_active(self) -> bool:
        """Check if the drain loop is running."""
        return self._active

    @property
    def is_bound(self) -> bool:
        return self._binding is not None

    @property
    def has_predicate(self) -> bool:
        return self._predicate is not None

    def change_policy(self, policy: Policy) -> None:
        """
        Change the policy of the scheduler.

        Can be called while tasks are being handled; it is used from the
        next selection on.

        Raises:
            InvalidPolicyError: If policy is not FIFO or LIFO
        """
        self._ensure_alive()
        self._policy = coerce_policy(policy)

    def get_number_of_tasks(self) -> int:
        """Number of tasks currently in queue, including the one being handled."""
        self._ensure_alive()
        return len(self._pending)

    def bind_callback(self, callback: Callable[[Any], Any]) -> None:
        """
        Bind the callback that handles tasks. Must be called before adding tasks.

        The callback may be a plain function or a coroutine function. Binding
        while another callback is bound only warns and keeps the old one.

        Raises:
            InvalidCallbackError: If callback is not callable
        """
        self._ensure_alive()
        if self._binding is not None:
            message = f"A callback is already bound to scheduler {self._name}"
            logger.warning(message)
            warnings.warn(message, AlreadyBoundWarning, stacklevel=2)
            return
        if not callable(callback):
            raise InvalidCallbackError(f"Callback must be callable, got {callback!r}")

        self._binding = self._new_task_signal.connect(self._consumer(callback))
        logger.debug(f"Callback bound to scheduler {self._name}")

    def unbind_callback(self) -> None:
        """
        Remove the bound callback.

        This stops the scheduler and clears the queue. A task already handed
        to the callback is still waited for; the loop stops right after it.
        A new callback must be bound before adding tasks again.
        """
        self._ensure_alive()
        if self._binding is None:
            return
        self._binding.disconnect()
        self._binding = None
        logger.debug(f"Callback unbound from scheduler {self._name}")

        # a delivery that has not reached the callback yet never will
        if self._delivery is not None:
            self._delivery.cancel()
            self._delivery = None
            self._handled_task_signal.fire(_UNDELIVERED)

    def add_predicate(self, predicate: Callable[[Any], bool]) -> None:
        """
        Filter tasks right before delivery. Returning False drops the task.

        Replaces any predicate already set.

        Raises:
            InvalidCallbackError: If predicate is not callable
        """
        self._ensure_alive()
        if not callable(predicate):
            raise InvalidCallbackError(f"Predicate must be callable, got {predicate!r}")
        self._predicate = predicate

    def remove_predicate(self) -> None:
        self._ensure_alive()
        self._predicate = None

    def connect_to_queue_empty(self, callback: Callable[[], Any]) -> Connection:
        """
        Listen for the queue running out of tasks.

        The callback is called with no arguments once per drain cycle that
        empties the queue.

        Raises:
            InvalidCallbackError: If callback is not callable
        """
        self._ensure_alive()
        return self._queue_empty_signal.connect(callback)

    def done_handling_task(self) -> None:
        """
        Notify the scheduler that the callback is ready for the next task.

        Without this call the scheduler waits forever. Calls made while no
        task is being waited on have no effect.
        """
        self._ensure_alive()
        self._handled_task_signal.fire()

    acknowledge = done_handling_task

    def add_tasks(self, *tasks: Any) -> None:
        """
        Add tasks to the queue, starting the scheduler if it is not active.

        Raises:
            NoConsumerBoundError: If no callback is bound
            RuntimeError: If no loop was given and none is running
        """
        self._ensure_alive()
        if self._binding is None:
            raise NoConsumerBoundError(f"No callback has been bound to scheduler {self._name}")

        # the drain task first runs on a later turn, after the extend below
        if not self._active:
            self._drain_task = self._event_loop.spawn(self._drain(), name=f"{self._name}-drain")
            self._active = True
        self._pending.extend(tasks)

    async def wait_until_idle(self) -> None:
        """Suspend until the drain loop stops. Returns at once if it is not running."""
        self._ensure_alive()
        if self._active:
            await self._idle_signal.wait()

    def destroy(self) -> None:
        """Halt the scheduler and clear all values. Safe to call more than once."""
        if self._destroyed:
            return
        logger.debug(f"Destroying scheduler {self._name}")
        self._event_loop.cancel(self._drain_task)
        if self._delivery is not None:
            self._delivery.cancel()

        self._idle_signal.fire()
        for signal in (
            self._new_task_signal,
            self._handled_task_signal,
            self._queue_empty_signal,
            self._idle_signal,
        ):
            signal.destroy()

        self._pending.clear()
        self._binding = None
        self._predicate = None
        self._active = False
        self._drain_task = None
        self._delivery = None
        self._destroyed = True

    async def __aenter__(self) -> "Scheduler":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.destroy()

    def __repr__(self) -> str:
        return (
            f"<Scheduler {self._name} policy={self._policy.value} "
            f"pending={len(self._pending)} active={self._active}>"
        )

    async def _drain(self) -> None:
        logger.debug(f"Scheduler {self._name} started handling tasks")
        while self._active and self._binding is not None:
            index = select_index(self._pending, self._policy)
            if index is None:
                self._stop()
                self._queue_empty_signal.fire()
                return

            task = self._pending[index]
            accepted = self._accepts(task)
            if self._destroyed:
                return
            # the predicate may have unbound the callback
            if self._binding is None:
                continue
            if not accepted:
                del self._pending[index]
                continue

            # deferred so the wait below is armed before the callback runs
            self._deliveries += 1
            self._delivery = self._event_loop.defer(self._deliver, task)
            released = await self._handled_task_signal.wait()
            if released is _UNDELIVERED:
                continue
            del self._pending[index]

        self._pending.clear()
        self._stop()

    def _stop(self) -> None:
        self._active = False
        self._drain_task = None
        logger.debug(f"Scheduler {self._name} stopped handling tasks")
        self._idle_signal.fire()

    def _deliver(self, task: Any) -> None:
        self._delivery = None
        self._new_task_signal.fire(task)

    def _accepts(self, task: Any) -> bool:
        predicate = self._predicate
        if predicate is None:
            return True
        try:
            return bool(predicate(task))
        except Exception as e:
            logger.error(f"Predicate failed for task {task!r}, dropping it: {e}", exc_info=e)
            return False

    def _consumer(self, callback: Callable[[Any], Any]) -> Callable[[Any], Any]:
        """Wrap the callback so a failing task is released instead of stalling the queue."""

        def consume(task: Any) -> Any:
            delivery = self._deliveries
            try:
                result = callback(task)
            except Exception as e:
                self._release_failed(task, delivery, e)
                return None
            if inspect.isawaitable(result):
                return self._consume_async(task, delivery, result)
            return result

        return consume

    async def _consume_async(self, task: Any, delivery: int, result: Awaitable[Any]) -> Any:
        try:
            return await result
        except Exception as e:
            self._release_failed(task, delivery, e)
            return None

    def _release_failed(self, task: Any, delivery: int, error: Exception) -> None:
        logger.error(f"Callback failed handling task {task!r}: {error}", exc_info=error)
        # only release the wait that belongs to this delivery
        if not self._destroyed and delivery == self._deliveries:
            self._handled_task_signal.fire()

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise SchedulerDestroyedError(f"Scheduler {self._name} has been destroyed")
