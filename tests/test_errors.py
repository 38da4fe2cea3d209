from __future__ import annotations

import pytest

from fallible import ConfigurationError, FallibleError, ResultError

pytestmark = pytest.mark.unit


def test_fallible_error_carries_hint() -> None:
    err = FallibleError("boom", hint="do this")
    assert str(err) == "boom"
    assert err.hint == "do this"


def test_subclass_hierarchy() -> None:
    """ConfigurationError and ResultError are catchable as FallibleError."""
    assert isinstance(ConfigurationError("bad"), FallibleError)
    assert isinstance(ResultError("payload"), FallibleError)


def test_result_error_keeps_payload() -> None:
    payload = {"reason": "quota"}
    err = ResultError(payload)

    assert err.error is payload
    assert "quota" in str(err)
    assert err.hint is None
