"""Result monad for explicit, non-throwing error handling.

A ``Result`` is exactly one of ``Success(value)`` or ``Failure(error)``.
Both variants are frozen and compare by value. Branch with ``match`` on the
class patterns or on the ``success`` discriminant:

    match load_user(uid):
        case Success(user):
            render(user)
        case Failure(err):
            report(err)

The functions in this module are synchronous and pure. Awaitable bridging,
racing, retries and timeouts live in sibling modules.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import dataclasses
import functools
from typing import Any, ClassVar, NamedTuple, ParamSpec, TypeGuard, TypeVar

from fallible.errors import ResultError
from fallible.service_error import (
    FUNCTION_ERROR,
    ServiceError,
    call_details,
    message_from,
    service_error,
)

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")
R = TypeVar("R")
P = ParamSpec("P")


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome carrying ``value``."""

    success: ClassVar[bool] = True

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed outcome carrying ``error``."""

    success: ClassVar[bool] = False

    error: TFailure


Result = Success[T] | Failure[E]


class Partitioned(NamedTuple):
    """Outcome of :func:`partition`; unpacks as ``(successes, errors)``."""

    successes: list[Any]
    errors: list[Any]


# --- Construction ---


def success(value: T) -> Success[T]:
    """Wrap ``value`` as a success."""
    return Success(value)


def failure(error: E) -> Failure[E]:
    """Wrap ``error`` as a failure."""
    return Failure(error)


# --- Predicates ---


def is_success(result: Result[T, E]) -> TypeGuard[Success[T]]:
    return isinstance(result, Success)


def is_failure(result: Result[T, E]) -> TypeGuard[Failure[E]]:
    return isinstance(result, Failure)


# --- Transform ---


def map_result(result: Result[T, E], mapper: Callable[[T], U]) -> Result[U, E]:
    """Apply ``mapper`` to a success value; pass failures through untouched.

    ``mapper`` must be total. It is never called for a failure.
    """
    match result:
        case Success(value):
            return Success(mapper(value))
        case _:
            return result


def map_failure(result: Result[T, E], mapper: Callable[[E], F]) -> Result[T, F]:
    """Apply ``mapper`` to a failure's error; pass successes through untouched."""
    match result:
        case Failure(error):
            return Failure(mapper(error))
        case _:
            return result


def chain(result: Result[T, E], step: Callable[[T], Result[U, E]]) -> Result[U, E]:
    """Feed a success value into the next fallible ``step`` (flat-map)."""
    match result:
        case Success(value):
            return step(value)
        case _:
            return result


def fold(
    result: Result[T, E],
    on_success: Callable[[T], R],
    on_failure: Callable[[E], R],
) -> R:
    """Collapse a result into a single value by handling both variants."""
    match result:
        case Success(value):
            return on_success(value)
        case Failure(error):
            return on_failure(error)
    raise TypeError(f"Expected Success or Failure, got {type(result).__name__}")


def unwrap_or(result: Result[T, E], default: T) -> T:
    """Return the success value, or ``default`` on failure."""
    return result.value if isinstance(result, Success) else default


def unwrap(result: Result[T, E]) -> T:
    """Return the success value or raise the failure.

    Exception payloads are raised as-is; any other payload is raised wrapped
    in :class:`ResultError`.
    """
    match result:
        case Success(value):
            return value
        case Failure(error) if isinstance(error, BaseException):
            raise error
        case Failure(error):
            raise ResultError(error)
    raise TypeError(f"Expected Success or Failure, got {type(result).__name__}")


# --- Aggregation ---


def combine(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
    """Collect all success values, or return the first failure.

    Short-circuits: elements after the first failure are not consumed, so a
    lazy iterable's remaining effects never run.
    """
    values: list[T] = []
    for result in results:
        if isinstance(result, Failure):
            return result
        values.append(result.value)
    return Success(values)


def partition(results: Iterable[Result[T, E]]) -> Partitioned:
    """Bucket every result by variant, preserving order within each bucket."""
    successes: list[T] = []
    errors: list[E] = []
    for result in results:
        if isinstance(result, Success):
            successes.append(result.value)
        else:
            errors.append(result.error)
    return Partitioned(successes, errors)


def filter_successes(results: Iterable[Result[T, E]]) -> list[T]:
    return partition(results).successes


def filter_failures(results: Iterable[Result[T, E]]) -> list[E]:
    return partition(results).errors


# --- Function wrapping ---


def wrap_sync(fn: Callable[P, R]) -> Callable[P, Result[R, ServiceError]]:
    """Turn a raising function into one that returns a ``Result``.

    Exceptions become ``FUNCTION_ERROR`` failures whose details hold the call
    arguments and the original exception. Usable as a decorator.
    """
    if not callable(fn):
        raise TypeError(f"wrap_sync expects a callable, got {type(fn).__name__}")

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[R, ServiceError]:
        try:
            return Success(fn(*args, **kwargs))
        except Exception as exc:
            return Failure(
                service_error(
                    FUNCTION_ERROR,
                    message_from(exc, "Function execution failed"),
                    call_details(args, kwargs, exc),
                )
            )

    return wrapper
