"""Configuration: validated defaults for retries and timeouts.

Resolution precedence is ``defaults < env (FALLIBLE_*) < overrides``. The
pydantic ``Settings`` schema is the single source of truth for fields and
validation; callers receive an immutable ``Config``.

Example:
    cfg = resolve_config({"max_attempts": 5})
    result = await retry_with_policy(fetch, cfg.retry)
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, model_validator

from fallible.errors import ConfigurationError
from fallible.retry import RetryPolicy, retry_with_policy
from fallible.timeout import with_timeout

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from fallible.result import Result
    from fallible.service_error import ServiceError

T = TypeVar("T")

ENV_PREFIX = "FALLIBLE_"

_DOTENV_LOADED: bool = False


class Settings(BaseModel):
    """Pydantic schema for configuration validation and defaults."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay_s: float = Field(default=1.0, ge=0)
    backoff_multiplier: float = Field(default=2.0, gt=0)
    max_delay_s: float | None = Field(default=None, ge=0)
    jitter: bool = False
    timeout_s: float | None = Field(default=None, gt=0)
    cancel_on_timeout: bool = True

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_delay_cap(self) -> Settings:
        """A delay cap below the base delay would make the base meaningless."""
        if self.max_delay_s is not None and self.max_delay_s < self.base_delay_s:
            raise ValueError("max_delay_s must be >= base_delay_s")
        return self


@dataclass(frozen=True)
class Config:
    """Immutable configuration payload consumed by the combinators."""

    retry: RetryPolicy = field(default_factory=RetryPolicy)
    timeout_s: float | None = None
    cancel_on_timeout: bool = True

    def __str__(self) -> str:
        """Return a compact, developer-friendly representation."""
        r = self.retry
        return (
            f"Config(max_attempts={r.max_attempts}, base_delay_s={r.base_delay_s}, "
            f"backoff_multiplier={r.backoff_multiplier}, timeout_s={self.timeout_s})"
        )


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once per process."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


def load_env(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read ``FALLIBLE_*`` variables into raw field values.

    Empty values are treated as unset. Type coercion is left to pydantic.
    """
    source = os.environ if env is None else env
    values: dict[str, Any] = {}
    for key, value in source.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name not in Settings.model_fields:
            continue
        if value.strip() == "":
            continue
        values[name] = value.strip()
    return values


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Config:
    """Resolve configuration from defaults, environment and overrides.

    Args:
        overrides: Programmatic values; highest precedence.
        env: Environment mapping to read instead of ``os.environ``. When
            omitted, a ``.env`` file is loaded first.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    if env is None:
        _try_load_dotenv()

    merged = {**load_env(env), **(overrides or {})}
    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        msg = err.get("msg") or "invalid value"
        # Remove "Value error, " prefix if present (Pydantic standard wrapper)
        if msg.startswith("Value error, "):
            msg = msg[13:]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        fields = sorted({str(x["loc"][0]) for x in e.errors() if x.get("loc")})
        hint = (
            "Check " + ", ".join(f"{ENV_PREFIX}{f.upper()}" for f in fields)
            if fields
            else None
        )
        raise ConfigurationError(
            f"Configuration validation failed: {loc + ': ' if loc else ''}{msg}",
            hint=hint,
        ) from e

    return Config(
        retry=RetryPolicy(
            max_attempts=settings.max_attempts,
            base_delay_s=settings.base_delay_s,
            backoff_multiplier=settings.backoff_multiplier,
            max_delay_s=settings.max_delay_s,
            jitter=settings.jitter,
        ),
        timeout_s=settings.timeout_s,
        cancel_on_timeout=settings.cancel_on_timeout,
    )


async def run_configured(
    operation: Callable[[], Awaitable[Result[T, ServiceError]]],
    config: Config | None = None,
) -> Result[T, ServiceError]:
    """Run ``operation`` under the retry policy and per-attempt timeout of ``config``.

    Uses ``resolve_config()`` when no config is given. A timed-out attempt
    counts as a failed attempt and is retried like any other failure.
    """
    cfg = config if config is not None else resolve_config()
    if cfg.timeout_s is None:
        return await retry_with_policy(operation, cfg.retry)
    timeout_s = cfg.timeout_s

    async def bounded() -> Result[T, ServiceError]:
        return await with_timeout(
            operation, timeout_s, cancel_on_timeout=cfg.cancel_on_timeout
        )

    return await retry_with_policy(bounded, cfg.retry)
