"""Time-bounded execution of Result-producing operations."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from fallible.result import Failure, Result
from fallible.service_error import (
    OPERATION_TIMEOUT,
    TIMEOUT_ERROR,
    ServiceError,
    message_from,
    service_error,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

log = logging.getLogger(__name__)

# Strong references to operations left running after a timeout; the event
# loop only keeps weak references to tasks.
_background_tasks: set[asyncio.Task[Any]] = set()


def _consume_outcome(task: asyncio.Task[Any]) -> None:
    """Avoid 'Task exception was never retrieved' for abandoned operations."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        log.debug("with_timeout: abandoned operation raised %r", exc)


async def with_timeout(
    operation: Callable[[], Awaitable[Result[T, ServiceError]]],
    timeout_s: float,
    *,
    cancel_on_timeout: bool = True,
) -> Result[T, ServiceError]:
    """Race ``operation`` against a ``timeout_s`` timer.

    - Operation settles first: its own ``Result`` is returned unchanged.
    - Operation raises or cancels itself: ``TIMEOUT_ERROR`` failure with the
      original exception.
    - Timer fires first: ``OPERATION_TIMEOUT`` failure. The operation is
      cancelled, or with ``cancel_on_timeout=False`` left to finish in the
      background with its outcome discarded.

    Cancelling the caller cancels the operation as well.
    """
    if timeout_s <= 0:
        raise ValueError(f"timeout_s must be > 0, got {timeout_s}")

    try:
        task = asyncio.ensure_future(operation())
    except Exception as exc:
        return _raised(exc, timeout_s)

    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_s)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        if task.cancelled():
            # The operation cancelled itself; the caller was not cancelled.
            return _raised(asyncio.CancelledError(), timeout_s)
        try:
            return task.result()
        except Exception as exc:
            return _raised(exc, timeout_s)

    task.add_done_callback(_consume_outcome)
    if cancel_on_timeout:
        task.cancel()
        log.debug("with_timeout: cancelled operation after %.3fs", timeout_s)
    else:
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        log.debug(
            "with_timeout: operation still running after %.3fs; result will be discarded",
            timeout_s,
        )
    return Failure(
        service_error(
            OPERATION_TIMEOUT,
            f"Operation timed out after {timeout_s}s",
            {"timeout_s": timeout_s},
        )
    )


def _raised(exc: BaseException, timeout_s: float) -> Failure[ServiceError]:
    return Failure(
        service_error(
            TIMEOUT_ERROR,
            message_from(exc, "Operation timed out"),
            {"timeout_s": timeout_s, "original_error": exc},
        )
    )
