"""Retry with exponential backoff for idempotent store reads.

Only read-only operations may be wrapped. Writes that time out have an
unknown outcome and must be re-checked by the caller instead of replayed.
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

import structlog

from core.exceptions import TransientStoreError

logger = structlog.get_logger()

MAX_RETRIES = 3
RETRY_BASE_SECONDS = 0.1

P = ParamSpec("P")
T = TypeVar("T")


def retry_transient(
    max_retries: int = MAX_RETRIES,
    base_seconds: float = RETRY_BASE_SECONDS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Retry an async read when it raises TransientStoreError."""

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except TransientStoreError:
                    attempt += 1
                    if attempt >= max_retries:
                        raise

                backoff = base_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "store_read_retry",
                    operation=func.__qualname__,
                    attempt=attempt,
                    backoff=backoff,
                )
                await asyncio.sleep(backoff)

        return wrapper

    return decorator
