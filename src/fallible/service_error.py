"""Canonical failure payload used when no domain-specific error type is given."""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Final


class Severity(str, Enum):
    """Informational severity; never changes combinator behavior."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Codes synthesized by the combinators themselves. Leaf classifications:
# callers match on the string, there is no hierarchy.
PROMISE_ERROR: Final[str] = "PROMISE_ERROR"
FUNCTION_ERROR: Final[str] = "FUNCTION_ERROR"
ASYNC_FUNCTION_ERROR: Final[str] = "ASYNC_FUNCTION_ERROR"
MAX_RETRIES_EXCEEDED: Final[str] = "MAX_RETRIES_EXCEEDED"
OPERATION_TIMEOUT: Final[str] = "OPERATION_TIMEOUT"
TIMEOUT_ERROR: Final[str] = "TIMEOUT_ERROR"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclasses.dataclass(frozen=True, slots=True)
class ServiceError:
    """Structured failure payload.

    ``details`` carries arbitrary context (the original exception, attempt
    counts, ...). ``timestamp`` is assigned at construction.
    """

    code: str
    message: str
    details: Mapping[str, Any] | None = None
    severity: Severity = Severity.MEDIUM
    timestamp: datetime = dataclasses.field(default_factory=_utcnow, compare=False)

    def __post_init__(self) -> None:
        """Normalize string severities to the enum."""
        if not isinstance(self.severity, Severity):
            try:
                sev = Severity(self.severity)
            except ValueError:
                raise ValueError(
                    f"severity must be one of {[s.value for s in Severity]}, "
                    f"got {self.severity!r}"
                ) from None
            object.__setattr__(self, "severity", sev)

    def with_details(self, **extra: Any) -> ServiceError:
        """Return a copy with ``extra`` merged over the existing details."""
        merged = {**(self.details or {}), **extra}
        return dataclasses.replace(self, details=merged)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging or API responses.

        Exceptions inside ``details`` are rendered with ``repr`` so the result
        stays JSON-friendly.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": (
                {k: _jsonable(v) for k, v in self.details.items()}
                if self.details is not None
                else None
            ),
            "timestamp": self.timestamp.isoformat(),
            "severity": self.severity.value,
        }


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, ServiceError):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, BaseException):
        return repr(value)
    # Result variants and other dataclasses
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    return repr(value)


def service_error(
    code: str,
    message: str,
    details: Mapping[str, Any] | None = None,
    severity: Severity | str = Severity.MEDIUM,
) -> ServiceError:
    """Build a ``ServiceError`` stamped with the current UTC time."""
    return ServiceError(
        code=code,
        message=message,
        details=details,
        severity=severity,  # type: ignore[arg-type]
    )


def message_from(exc: BaseException, fallback: str) -> str:
    """Return ``str(exc)`` or ``fallback`` when the exception has no message."""
    text = str(exc)
    return text if text else fallback


def call_details(
    args: tuple[Any, ...], kwargs: Mapping[str, Any], exc: BaseException
) -> dict[str, Any]:
    """Details recorded when a wrapped function raises."""
    return {"args": args, "kwargs": dict(kwargs), "original_error": exc}
