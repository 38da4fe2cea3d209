from __future__ import annotations

from datetime import UTC, datetime
import json

import pytest

from fallible import ServiceError, Severity, failure, service_error

pytestmark = pytest.mark.unit


def test_service_error_defaults() -> None:
    before = datetime.now(UTC)
    err = service_error("NOT_FOUND", "Project not found")
    after = datetime.now(UTC)

    assert err.code == "NOT_FOUND"
    assert err.message == "Project not found"
    assert err.details is None
    assert err.severity is Severity.MEDIUM
    assert before <= err.timestamp <= after
    assert err.timestamp.tzinfo is not None


def test_severity_accepts_string_values() -> None:
    err = service_error("DB_DOWN", "database unavailable", severity="critical")
    assert err.severity is Severity.CRITICAL
    assert ServiceError("X", "y", severity="low").severity is Severity.LOW


def test_unknown_severity_is_rejected() -> None:
    with pytest.raises(ValueError, match="severity must be one of"):
        ServiceError("X", "y", severity="urgent")  # type: ignore[arg-type]


def test_constructor_reports_allowed_severities() -> None:
    with pytest.raises(ValueError, match=r"severity must be one of .*'critical'"):
        service_error("X", "y", severity="urgent")


def test_service_error_is_immutable() -> None:
    err = service_error("X", "y")
    with pytest.raises(AttributeError):
        err.code = "Z"  # type: ignore[misc]


def test_equality_ignores_timestamp() -> None:
    assert service_error("X", "y", {"a": 1}) == service_error("X", "y", {"a": 1})


def test_with_details_merges_without_mutating() -> None:
    err = service_error("X", "y", {"a": 1})
    richer = err.with_details(b=2)

    assert richer.details == {"a": 1, "b": 2}
    assert err.details == {"a": 1}
    assert richer.timestamp == err.timestamp


def test_to_dict_is_json_serializable() -> None:
    inner = service_error("UPSTREAM", "provider failed")
    err = service_error(
        "MAX_RETRIES_EXCEEDED",
        "Operation failed after 3 attempts",
        {
            "max_attempts": 3,
            "last_error": inner,
            "original_error": ValueError("bad"),
            "history": [failure("a")],
        },
        severity=Severity.HIGH,
    )

    payload = err.to_dict()
    json.dumps(payload)

    assert payload["code"] == "MAX_RETRIES_EXCEEDED"
    assert payload["severity"] == "high"
    assert payload["details"]["max_attempts"] == 3
    assert payload["details"]["last_error"]["code"] == "UPSTREAM"
    assert payload["details"]["original_error"] == "ValueError('bad')"
    assert payload["details"]["history"] == [{"error": "a"}]
    assert payload["timestamp"] == err.timestamp.isoformat()
