"""Exception hierarchy for Fallible.

Expected failures travel as ``Failure`` values. The exceptions here cover the
two places where raising is the contract: invalid configuration and
unwrapping a ``Failure`` at a throw-based call site.
"""

from __future__ import annotations

from typing import Any


class FallibleError(Exception):
    """Base exception for all Fallible errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(FallibleError):
    """Configuration validation or resolution failed."""


class ResultError(FallibleError):
    """A ``Failure`` was unwrapped and its payload is not an exception.

    The original error value is kept on ``error`` so callers can still
    pattern-match on it after catching.
    """

    def __init__(self, error: Any, *, hint: str | None = None) -> None:
        code = getattr(error, "code", None)
        message = getattr(error, "message", None)
        if isinstance(code, str) and isinstance(message, str):
            text = f"{code}: {message}"
        else:
            text = f"Result failed with {error!r}"
        super().__init__(text, hint=hint)
        self.error = error
