"""Bounded retry polling for asynchronously generated resources."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..types import Exhausted, PollOutcome, RetryPolicy, Success

T = TypeVar("T")

Probe = Callable[[], Awaitable[T]]
Sleeper = Callable[[float], Awaitable[None]]


async def poll(
    probe: Probe[T],
    policy: RetryPolicy,
    *,
    reason: str = "Ran out of retries",
    sleep: Sleeper = asyncio.sleep,
) -> PollOutcome[T]:
    """Invoke ``probe`` until it returns or ``policy.max_attempts`` calls have failed.

    Every call, the first included, consumes one attempt. The delay is awaited
    only between a failed attempt and the next one.
    """
    last_error: Exception | None = None
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return Success(await probe())
        except Exception as err:
            last_error = err
        if attempt == policy.max_attempts:
            break
        await sleep(policy.delay_seconds)
    return Exhausted(last_error=last_error, attempts=policy.max_attempts, reason=reason)


async def poll_with_retries(
    probe: Probe[T],
    policy: RetryPolicy,
    *,
    reason: str = "Ran out of retries",
    sleep: Sleeper = asyncio.sleep,
) -> T:
    """Like :func:`poll` but raises ``RetryExhausted`` instead of returning ``Exhausted``."""
    outcome = await poll(probe, policy, reason=reason, sleep=sleep)
    return outcome.unwrap()
