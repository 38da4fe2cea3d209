"""Bridges between awaitables that raise and ``Result`` values.

``asyncio.CancelledError`` is never converted into a failure: cancellation
belongs to the caller's task, not to the operation's outcome.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import functools
from typing import ParamSpec, TypeVar

from fallible.result import Failure, Result, Success, unwrap
from fallible.service_error import (
    ASYNC_FUNCTION_ERROR,
    PROMISE_ERROR,
    ServiceError,
    call_details,
    message_from,
    service_error,
)

T = TypeVar("T")
E = TypeVar("E")
R = TypeVar("R")
P = ParamSpec("P")


async def from_awaitable(awaitable: Awaitable[T]) -> Result[T, ServiceError]:
    """Await ``awaitable`` and capture its outcome as a ``Result``.

    Raised exceptions become ``PROMISE_ERROR`` failures with the exception
    under ``details["original_error"]``.
    """
    try:
        value = await awaitable
    except Exception as exc:
        return Failure(
            service_error(
                PROMISE_ERROR,
                message_from(exc, "Unknown error"),
                {"original_error": exc},
            )
        )
    return Success(value)


async def to_awaitable(result: Result[T, E]) -> T:
    """Resolve with the success value, or raise the failure.

    Inverse of :func:`from_awaitable` for throw-based call sites. Non-exception
    error payloads are raised wrapped in ``ResultError``.
    """
    return unwrap(result)


def wrap_async(
    fn: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[Result[R, ServiceError]]]:
    """Async counterpart of ``wrap_sync``; failures use ``ASYNC_FUNCTION_ERROR``."""
    if not callable(fn):
        raise TypeError(f"wrap_async expects a callable, got {type(fn).__name__}")

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[R, ServiceError]:
        try:
            value = await fn(*args, **kwargs)
        except Exception as exc:
            return Failure(
                service_error(
                    ASYNC_FUNCTION_ERROR,
                    message_from(exc, "Async function execution failed"),
                    call_details(args, kwargs, exc),
                )
            )
        return Success(value)

    return wrapper
