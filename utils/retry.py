"""Async retry helpers with exponential backoff."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar
import structlog

log = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay before retry number ``attempt + 1``."""
    return min(base_delay * (2 ** attempt), max_delay)


async def retry_async(
    func: Callable[P, Awaitable[R]],
    *args: P.args,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    **kwargs: P.kwargs,
) -> R:
    """Await ``func(*args, **kwargs)``, retrying on ``exceptions``.

    The last exception is re-raised once ``max_retries`` retries are spent.
    """
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except exceptions as e:
            if attempt >= max_retries:
                raise
            delay = backoff_delay(attempt, base_delay, max_delay)
            attempt += 1
            log.warning(
                "retry_attempt",
                func=getattr(func, "__name__", repr(func)),
                attempt=attempt,
                max_retries=max_retries,
                delay=delay,
                error=str(e),
            )
            await asyncio.sleep(delay)

