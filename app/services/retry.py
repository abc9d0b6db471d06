"""Bounded retry with a fixed delay between attempts."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay: float = 0.5

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must be non-negative")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await ``operation`` until it succeeds or ``policy.max_attempts`` is reached.

    Only exceptions matching ``retry_on`` are retried; the last one is
    re-raised once attempts are exhausted. No delay follows the final attempt.
    """

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            if attempt == policy.max_attempts:
                raise
            logger.debug(
                "Attempt %s/%s failed: %s", attempt, policy.max_attempts, exc
            )
            await sleep(policy.delay)

    # Unreachable: the loop either returns or re-raises.
    raise RuntimeError("retry_async exhausted without a result")


__all__ = ["RetryPolicy", "retry_async"]
