"""
Exception module for async_task_scheduler.

This module defines specific exceptions that may be raised by the component.
"""


class SchedulerError(Exception):
    """Base exception for errors in the Scheduler."""


class InvalidPolicyError(SchedulerError, ValueError):
    """Raised when a policy other than FIFO or LIFO is requested."""


class NoConsumerBoundError(SchedulerError):
    """Raised when tasks are added before a callback has been bound."""


class InvalidCallbackError(SchedulerError, TypeError):
    """Raised when a callback, predicate or listener is not callable."""


class SchedulerDestroyedError(SchedulerError):
    """Raised when trying to use a scheduler after destroy() was called."""


class AlreadyBoundWarning(RuntimeWarning):
    """Emitted when binding a callback while another one is still bound."""
