"""
Domain layer: policies and the interfaces implemented by the infrastructure.
"""

from async_task_scheduler.domain.policy import Policy, coerce_policy, select_index
from async_task_scheduler.domain.scheduler import SchedulerInterface
from async_task_scheduler.domain.signal import ConnectionInterface, SignalInterface

__all__ = [
    "Policy",
    "coerce_policy",
    "select_index",
    "SchedulerInterface",
    "ConnectionInterface",
    "SignalInterface",
]
