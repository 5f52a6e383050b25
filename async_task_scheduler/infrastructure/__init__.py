"""
Infrastructure layer: concrete Scheduler, Signal and EventLoop components.
"""

from async_task_scheduler.infrastructure.event_loop import EventLoop, new_event_loop
from async_task_scheduler.infrastructure.scheduler import Scheduler
from async_task_scheduler.infrastructure.signal import Connection, Signal

__all__ = ["EventLoop", "new_event_loop", "Scheduler", "Connection", "Signal"]
