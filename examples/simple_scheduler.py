"""
Example demonstrating a scheduler handing tasks to a slow consumer.
"""

import asyncio
import logging

from async_task_scheduler import Policy, Scheduler, run

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main() -> None:
    scheduler = Scheduler(Policy.FIFO, name="downloads")

    async def handle(url: str) -> None:
        logger.info(f"Downloading {url}")
        await asyncio.sleep(0.2)
        scheduler.done_handling_task()

    scheduler.bind_callback(handle)
    scheduler.add_predicate(lambda url: not url.endswith(".exe"))
    scheduler.connect_to_queue_empty(lambda: logger.info("All downloads handled"))

    try:
        scheduler.add_tasks("a.txt", "setup.exe", "b.txt")
        logger.info(f"Queued {scheduler.get_number_of_tasks()} tasks")

        # Newest first from now on
        scheduler.change_policy(Policy.LIFO)
        scheduler.add_tasks("c.txt", "d.txt")

        await scheduler.wait_until_idle()
    finally:
        scheduler.destroy()


if __name__ == "__main__":
    run(main())
