"""
Ordering policies and the selection function used by the scheduler.
"""

from enum import Enum
from typing import Any, Optional, Sequence

from async_task_scheduler.exceptions import InvalidPolicyError


class Policy(str, Enum):
    """Order in which pending tasks are handed to the consumer."""

    FIFO = "FIFO"
    LIFO = "LIFO"


def coerce_policy(value: Any) -> Policy:
    """
    Convert a user supplied value into a Policy.

    Args:
        value: A Policy member or its name ("FIFO" / "LIFO")

    Returns:
        The matching Policy

    Raises:
        InvalidPolicyError: If the value is not one of the known policies
    """
    if isinstance(value, Policy):
        return value
    if isinstance(value, str):
        try:
            return Policy(value)
        except ValueError:
            pass
    raise InvalidPolicyError(f"Unexpected policy {value!r}, expected one of FIFO or LIFO")


def select_index(pending: Sequence[Any], policy: Policy) -> Optional[int]:
    """Index of the next task to hand out, or None if nothing is pending."""
    if not pending:
        return None
    match policy:
        case Policy.FIFO:
            return 0
        case Policy.LIFO:
            return len(pending) - 1
    raise InvalidPolicyError(f"Unexpected policy {policy!r}")
