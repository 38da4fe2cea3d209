"""Fallible: Result values and combinators for fallible async operations.

Public API:
    - Success / Failure / Result: the two-variant outcome type
    - ServiceError: canonical structured failure payload
    - map_result / chain / combine / partition: pure combinators
    - try_sequential / try_parallel: fallback strategies
    - retry_with_backoff / with_timeout: resilience combinators
    - resolve_config / run_configured: configured retries and timeouts
"""

from __future__ import annotations

import logging

from fallible.bridge import from_awaitable, to_awaitable, wrap_async
from fallible.config import Config, Settings, resolve_config, run_configured
from fallible.errors import ConfigurationError, FallibleError, ResultError
from fallible.result import (
    Failure,
    Partitioned,
    Result,
    Success,
    chain,
    combine,
    failure,
    filter_failures,
    filter_successes,
    fold,
    is_failure,
    is_success,
    map_failure,
    map_result,
    partition,
    success,
    unwrap,
    unwrap_or,
    wrap_sync,
)
from fallible.retry import RetryPolicy, retry_with_backoff, retry_with_policy
from fallible.service_error import (
    ASYNC_FUNCTION_ERROR,
    FUNCTION_ERROR,
    MAX_RETRIES_EXCEEDED,
    OPERATION_TIMEOUT,
    PROMISE_ERROR,
    TIMEOUT_ERROR,
    ServiceError,
    Severity,
    service_error,
)
from fallible.strategies import try_parallel, try_sequential
from fallible.timeout import with_timeout

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("fallible")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("fallible").addHandler(logging.NullHandler())

__all__ = [
    "ASYNC_FUNCTION_ERROR",
    "FUNCTION_ERROR",
    "MAX_RETRIES_EXCEEDED",
    "OPERATION_TIMEOUT",
    "PROMISE_ERROR",
    "TIMEOUT_ERROR",
    "Config",
    "ConfigurationError",
    "Failure",
    "FallibleError",
    "Partitioned",
    "Result",
    "ResultError",
    "RetryPolicy",
    "ServiceError",
    "Settings",
    "Severity",
    "Success",
    "chain",
    "combine",
    "failure",
    "filter_failures",
    "filter_successes",
    "fold",
    "from_awaitable",
    "is_failure",
    "is_success",
    "map_failure",
    "map_result",
    "partition",
    "resolve_config",
    "retry_with_backoff",
    "retry_with_policy",
    "run_configured",
    "service_error",
    "success",
    "to_awaitable",
    "try_parallel",
    "try_sequential",
    "unwrap",
    "unwrap_or",
    "with_timeout",
    "wrap_async",
    "wrap_sync",
]
