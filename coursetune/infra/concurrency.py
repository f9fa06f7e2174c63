"""Concurrency utilities for async task management.

Provides semaphore-based concurrency control for async operations.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Tuple

logger = logging.getLogger(__name__)


async def run_concurrent_tasks(
    corofunc: Callable[..., Awaitable[Any]],
    args_list: List[Tuple[Any, ...]],
    concurrency_limit: int = 4,
) -> List[Any]:
    """
    Run async function concurrently over argument tuples with concurrency control.

    Results are returned in the order of ``args_list`` regardless of the order
    in which the tasks complete. A task that raises is logged and yields None.

    Args:
        corofunc: The async function to execute.
        args_list: List of argument tuples to pass to the function.
        concurrency_limit: Maximum number of concurrent tasks (default: 4).

    Returns:
        List of results from all task executions.
    """
    if concurrency_limit < 1:
        raise ValueError(f"concurrency_limit must be >= 1 (got {concurrency_limit})")
    semaphore = asyncio.Semaphore(concurrency_limit)

    async def worker(args: Tuple[Any, ...]) -> Any:
        async with semaphore:
            try:
                return await corofunc(*args)
            except Exception as e:
                logger.error(f"Task failed with arguments {args}: {e}")
                return None

    tasks = [asyncio.create_task(worker(args)) for args in args_list]
    return await asyncio.gather(*tasks)
