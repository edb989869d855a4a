"""
Safe background task execution with error handling.

Used for work that must not hold up or fail an HTTP response
(e.g. outbound notifications). Prevents silent failures by:
- Logging all errors with stack traces
- Tracking task references to prevent GC
"""

import asyncio
import logging
from typing import Coroutine, Any

logger = logging.getLogger(__name__)

# Track active tasks to prevent garbage collection
_active_background_tasks: set = set()


async def safe_background_task(coro: Coroutine, task_name: str) -> Any:
    """
    Wrapper for background tasks with error handling.

    Args:
        coro: Coroutine to execute
        task_name: Human-readable task name for logging

    Returns:
        Result of the coroutine if successful, None on error
    """
    try:
        result = await coro
        logger.info(f"Background task completed: {task_name}")
        return result
    except Exception as e:
        logger.error(
            f"Background task failed: {task_name} - {e}",
            exc_info=True
        )
        return None


def create_safe_task(coro: Coroutine, task_name: str) -> asyncio.Task:
    """
    Create a background task with error handling.

    Args:
        coro: Coroutine to execute
        task_name: Human-readable task name

    Returns:
        asyncio.Task object

    Example:
        task = create_safe_task(
            notifier.deliver(token, chat_id, text),
            "notify-task-created-42"
        )
    """
    task = asyncio.create_task(
        safe_background_task(coro, task_name)
    )

    # Store reference to prevent garbage collection
    _active_background_tasks.add(task)

    # Remove from tracking when done
    task.add_done_callback(_active_background_tasks.discard)

    logger.debug(f"Created safe background task: {task_name}")
    return task


async def wait_for_background_tasks(timeout: float = 5.0) -> None:
    """Wait for in-flight background tasks, e.g. during shutdown."""
    pending = list(_active_background_tasks)
    if not pending:
        return

    logger.info(f"Waiting for {len(pending)} background task(s) to finish")
    done, still_pending = await asyncio.wait(pending, timeout=timeout)
    for task in still_pending:
        task.cancel()
