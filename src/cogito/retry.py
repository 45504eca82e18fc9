"""Caller-side retries for ``send``.

Clients never retry on their own: ``send`` performs exactly one exchange.
Callers that want retries wrap it::

    response = await retry_send(client, request, policy=RetryPolicy(max_attempts=4))

or, for arbitrary awaitables, ``retry_async(lambda: ..., policy=...)``.

Only transport failures are repeated. Authentication failures and malformed
responses fail fast; repeating the call cannot fix them.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import random
import time
from typing import TYPE_CHECKING, Any, TypeVar

from cogito._http import RETRYABLE_STATUS_CODES
from cogito.errors import AuthenticationError, TransportError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cogito.client import AIClient, AIRequest

T = TypeVar("T")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to repeat a failed send, and how long to wait between tries."""

    max_attempts: int = 3
    initial_delay_s: float = 0.5
    backoff_multiplier: float = 2.0
    max_delay_s: float = 8.0
    jitter: bool = True  # full jitter
    #: Wall-clock budget across all attempts; ``None`` disables it.
    max_elapsed_s: float | None = 30.0

    def __post_init__(self) -> None:
        """Reject values that would make the schedule meaningless."""
        if self.max_attempts < 1:
            raise ValueError("RetryPolicy.max_attempts must be >= 1")
        if self.initial_delay_s < 0:
            raise ValueError("RetryPolicy.initial_delay_s must be >= 0")
        if self.backoff_multiplier <= 0:
            raise ValueError("RetryPolicy.backoff_multiplier must be > 0")
        if self.max_delay_s < 0:
            raise ValueError("RetryPolicy.max_delay_s must be >= 0")
        if self.max_elapsed_s is not None and self.max_elapsed_s < 0:
            raise ValueError("RetryPolicy.max_elapsed_s must be >= 0 or None")

    def backoff(self, retry_index: int) -> float:
        """Capped exponential delay before retry number *retry_index* (1-based)."""
        growth = self.backoff_multiplier ** max(0, retry_index - 1)
        delay = min(self.max_delay_s, self.initial_delay_s * growth)
        if delay <= 0:
            return 0.0
        return random.uniform(0, delay) if self.jitter else delay  # noqa: S311

    def delay_before_retry(self, retry_index: int, error: BaseException) -> float:
        """Backoff, lengthened to the provider's ``Retry-After`` when it asks for more."""
        delay = self.backoff(retry_index)
        if isinstance(error, TransportError) and error.retry_after_s is not None:
            delay = max(delay, error.retry_after_s)
        return delay


def should_retry_send(exc: BaseException) -> bool:
    """Return True when a failed ``send`` is worth repeating.

    Credential rejections, malformed replies, cancellation and anything that
    is not a :class:`TransportError` are final. Transport errors are
    repeated when flagged retryable or when their status is transient.
    """
    if isinstance(exc, AuthenticationError) or not isinstance(exc, TransportError):
        return False
    if exc.retryable:
        return True
    return exc.status_code in RETRYABLE_STATUS_CODES


async def retry_async(
    factory: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy | None = None,
    should_retry: Callable[[BaseException], bool] = should_retry_send,
) -> T:
    """Await ``factory()`` until it succeeds or the policy gives up.

    *factory* is called once per attempt so every attempt gets a fresh
    awaitable. The last error is re-raised unchanged.
    """
    policy = policy or RetryPolicy()
    deadline = (
        None if policy.max_elapsed_s is None else time.monotonic() + policy.max_elapsed_s
    )

    attempt = 1
    while True:
        try:
            return await factory()
        except Exception as exc:
            if attempt >= policy.max_attempts or not should_retry(exc):
                raise
            delay = policy.delay_before_retry(attempt, exc)
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise
                delay = min(delay, remaining)

            log.debug(
                "Attempt %d/%d failed with %s; retrying in %.2fs",
                attempt,
                policy.max_attempts,
                type(exc).__name__,
                delay,
            )
            if delay > 0:
                await asyncio.sleep(delay)
            attempt += 1


async def retry_send(
    client: AIClient[Any, Any],
    request: AIRequest,
    *,
    policy: RetryPolicy | None = None,
) -> Any:
    """``client.send(request)`` under *policy*, retrying transient transport failures."""
    return await retry_async(lambda: client.send(request), policy=policy)
