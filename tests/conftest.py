"""
Shared fixtures for the scheduler tests.
"""

import asyncio

import pytest
import pytest_asyncio

from async_task_scheduler import Scheduler


@pytest_asyncio.fixture
async def scheduler():
    """
    Fixture that provides a clean Scheduler bound to the test's loop and
    destroys it afterwards.
    """
    scheduler = Scheduler(name="test")
    yield scheduler
    scheduler.destroy()


@pytest.fixture
def settle():
    """Give the loop a few turns so deferred deliveries and acks go through."""

    async def _settle(turns: int = 10) -> None:
        for _ in range(turns):
            await asyncio.sleep(0)

    return _settle


@pytest.fixture
def received():
    return []
