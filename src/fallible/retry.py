"""Bounded retries with exponential backoff over Result-producing operations.

Design goals:
- Small API surface
- Explicit state (policy + attempt counters)
- Failures stay values: exhaustion returns ``MAX_RETRIES_EXCEEDED``, never raises
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import random
from typing import TYPE_CHECKING, TypeVar

from fallible.result import Failure, Result, Success
from fallible.service_error import MAX_RETRIES_EXCEEDED, ServiceError, service_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")
E = TypeVar("E")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry policy with exponential backoff and optional jitter."""

    max_attempts: int = 3
    base_delay_s: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay_s: float | None = None
    jitter: bool = False  # "full jitter" when enabled

    def __post_init__(self) -> None:
        """Validate invariants to keep retry behavior predictable."""
        if self.max_attempts < 1:
            raise ValueError("RetryPolicy.max_attempts must be >= 1")
        if self.base_delay_s < 0:
            raise ValueError("RetryPolicy.base_delay_s must be >= 0")
        if self.backoff_multiplier <= 0:
            raise ValueError("RetryPolicy.backoff_multiplier must be > 0")
        if self.max_delay_s is not None and self.max_delay_s < 0:
            raise ValueError("RetryPolicy.max_delay_s must be >= 0 or None")
        if self.max_delay_s is not None and self.max_delay_s < self.base_delay_s:
            raise ValueError("RetryPolicy.max_delay_s must be >= base_delay_s")

    def delay_after(self, attempt: int) -> float:
        """Return the sleep before the retry that follows failed ``attempt``.

        ``attempt`` starts at 1: the first sleep is ``base_delay_s``.
        """
        base = self.base_delay_s * (self.backoff_multiplier ** max(0, attempt - 1))
        if self.max_delay_s is not None:
            base = min(self.max_delay_s, base)
        if base <= 0:
            return 0.0
        if not self.jitter:
            return base
        # Full jitter: random in [0, base] to avoid thundering herd.
        return random.random() * base  # noqa: S311


async def retry_with_policy(
    operation: Callable[[], Awaitable[Result[T, E]]],
    policy: RetryPolicy,
    *,
    should_retry: Callable[[E], bool] | None = None,
) -> Result[T, ServiceError]:
    """Run ``operation`` until it succeeds or ``policy`` is exhausted.

    Attempts are strictly sequential. When ``should_retry`` returns False for
    a failure, no further attempts are made; the result is still a
    ``MAX_RETRIES_EXCEEDED`` failure, with ``details["stopped_early"]`` set and
    a message saying the error was not retryable. The failure carries only the
    last observed error, not the full history.
    """
    last_error: E | None = None
    attempts = 0
    stopped_early = False

    for attempt in range(1, policy.max_attempts + 1):
        attempts = attempt
        result = await operation()
        if isinstance(result, Success):
            return result

        last_error = result.error
        if attempt >= policy.max_attempts:
            break
        if should_retry is not None and not should_retry(last_error):
            log.debug("retry: attempt %d failed with non-retryable error", attempt)
            stopped_early = True
            break

        delay = policy.delay_after(attempt)
        log.debug(
            "retry: attempt %d/%d failed; sleeping %.3fs",
            attempt,
            policy.max_attempts,
            delay,
        )
        if delay > 0:
            await asyncio.sleep(delay)

    message = f"Operation failed after {attempts} attempts"
    if stopped_early:
        message += f" of {policy.max_attempts}; error was not retryable"
    return Failure(
        service_error(
            MAX_RETRIES_EXCEEDED,
            message,
            {
                "max_attempts": policy.max_attempts,
                "attempts": attempts,
                "stopped_early": stopped_early,
                "last_error": last_error,
            },
        )
    )


async def retry_with_backoff(
    operation: Callable[[], Awaitable[Result[T, E]]],
    max_attempts: int = 3,
    base_delay_s: float = 1.0,
    backoff_multiplier: float = 2.0,
    *,
    should_retry: Callable[[E], bool] | None = None,
) -> Result[T, ServiceError]:
    """Retry with delays of ``base_delay_s * backoff_multiplier ** (n - 1)``.

    Example:
        result = await retry_with_backoff(lambda: fetch_profile(uid), 3, 0.5)
    """
    policy = RetryPolicy(
        max_attempts=max_attempts,
        base_delay_s=base_delay_s,
        backoff_multiplier=backoff_multiplier,
    )
    return await retry_with_policy(operation, policy, should_retry=should_retry)
