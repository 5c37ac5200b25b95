from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Type, TypeVar

from ..errors import PollingTimeoutError

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

logger = logging.getLogger(__name__)


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    condition: Callable[[T], bool],
    attempts: int,
    interval: float,
    *,
    sleep: Optional[Sleep] = None,
    error_cls: Type[PollingTimeoutError] = PollingTimeoutError,
    message: str = "Condition was not met in time",
) -> T:
    """Call ``fetch`` until ``condition`` holds for its result.

    Sleeps ``interval`` seconds between attempts but not after the last one.

    Raises:
        PollingTimeoutError: (or ``error_cls``) after ``attempts`` misses.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    sleep = sleep or asyncio.sleep

    for attempt in range(1, attempts + 1):
        value = await fetch()
        if condition(value):
            return value
        if attempt < attempts:
            logger.debug(
                f"Poll attempt {attempt}/{attempts} not satisfied, retrying in {interval}s"
            )
            await sleep(interval)

    raise error_cls(message, attempts)
