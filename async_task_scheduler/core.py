"""
Core entry point for running scheduler based programs.
"""

import asyncio
import functools
from typing import Any, Coroutine, Optional, TypeVar

from async_task_scheduler.infrastructure.event_loop import new_event_loop

T = TypeVar("T")


def run(
    main: Coroutine[Any, Any, T],
    *,
    use_uvloop: bool = True,
    debug: Optional[bool] = None,
) -> T:
    """
    Run a coroutine to completion on a fresh event loop.

    Schedulers created inside ``main`` pick up this loop automatically.

    Args:
        main: Coroutine to execute
        use_uvloop: Run on uvloop instead of the default asyncio loop
        debug: Forwarded to the asyncio runner

    Returns:
        The result of the coroutine
    """
    loop_factory = functools.partial(new_event_loop, use_uvloop)
    with asyncio.Runner(debug=debug, loop_factory=loop_factory) as runner:
        return runner.run(main)
