"""Fallback strategies over several Result-producing operations.

Operations are zero-argument callables returning an awaitable ``Result``
(typically ``lambda: client.fetch(x)`` or an ``async def`` with no params).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from fallible.result import Failure, Result, Success

T = TypeVar("T")
E = TypeVar("E")

Operation = Callable[[], Awaitable[Result[T, E]]]


async def try_sequential(operations: Sequence[Operation[T, E]]) -> Result[T, list[E]]:
    """Run operations one at a time until one succeeds.

    Each operation is started only after the previous one finished, in list
    order. Returns the first success; if none succeed, a failure listing
    every error in attempted order.
    """
    errors: list[E] = []
    for operation in operations:
        result = await operation()
        if isinstance(result, Success):
            return result
        errors.append(result.error)
    return Failure(errors)


async def try_parallel(operations: Sequence[Operation[T, E]]) -> Result[T, list[E]]:
    """Run all operations concurrently and pick the first success in list order.

    Every operation is awaited to completion before a winner is chosen; a
    fast success does not cancel the others. Completion order does not affect
    which success is returned. If an operation raises, the others still run to
    completion and the exception of the lowest-indexed raiser propagates.
    """
    if not operations:
        return Failure([])
    # Call every factory before awaiting so all start in the same tick.
    awaitables = [operation() for operation in operations]
    # Collect every outcome before raising so no operation is left running
    # with an unobserved exception.
    outcomes = await asyncio.gather(*awaitables, return_exceptions=True)
    for item in outcomes:
        if isinstance(item, BaseException):
            # Deterministic: lowest list index, not first to fail.
            raise item
    results: list[Result[T, E]] = list(outcomes)
    for result in results:
        if isinstance(result, Success):
            return result
    return Failure([r.error for r in results if isinstance(r, Failure)])
