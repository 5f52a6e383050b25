"""
Single consumer task scheduler for asyncio.
"""

from async_task_scheduler.core import run
from async_task_scheduler.domain.policy import Policy
from async_task_scheduler.exceptions import (
    AlreadyBoundWarning,
    InvalidCallbackError,
    InvalidPolicyError,
    NoConsumerBoundError,
    SchedulerDestroyedError,
    SchedulerError,
)
from async_task_scheduler.infrastructure.scheduler import Scheduler
from async_task_scheduler.infrastructure.signal import Connection, Signal

__all__ = [
    "run",
    "Policy",
    "Scheduler",
    "Signal",
    "Connection",
    "SchedulerError",
    "InvalidPolicyError",
    "NoConsumerBoundError",
    "InvalidCallbackError",
    "SchedulerDestroyedError",
    "AlreadyBoundWarning",
]
