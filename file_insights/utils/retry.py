"""Async retry and deadline helpers shared by the analysis services."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryConfig:
    """Fixed attempt budget with a constant pause between attempts."""

    def __init__(self, *, attempts: int = 2, backoff_seconds: float = 1.0) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds


async def call_with_retry(
    func: Callable[..., Awaitable[T]],
    *args,
    retry_config: RetryConfig | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs,
) -> T:
    """Await ``func`` until it succeeds or the attempt budget runs out.

    The error of the final attempt is re-raised unchanged.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        attempt += 1
        try:
            return await func(*args, **kwargs)
        except retry_on as exc:
            if attempt >= config.attempts:
                raise
            logger.warning(
                "Attempt %d/%d of %s failed: %s",
                attempt,
                config.attempts,
                getattr(func, "__name__", repr(func)),
                exc,
            )
            await asyncio.sleep(config.backoff_seconds)


async def run_with_timeout(
    awaitable: Awaitable[T],
    timeout: float,
    on_timeout: Callable[[], BaseException],
) -> T:
    """Await ``awaitable`` for at most ``timeout`` seconds.

    The pending operation is cancelled on expiry and ``on_timeout()`` is raised.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise on_timeout() from exc


__all__ = ["RetryConfig", "call_with_retry", "run_with_timeout"]
