"""Tests for the service error classification."""

import pytest
from sqlalchemy.exc import OperationalError

from tourguide.application.errors import (
    CONNECTION_ERROR,
    PERSISTENCE_ERROR,
    VALIDATION_ERROR,
    ServiceResult,
    classify_error,
    is_connection_error,
)


@pytest.mark.parametrize(
    "exc",
    [
        OperationalError("SELECT 1", {}, Exception("database is locked")),
        TimeoutError("took too long"),
        ConnectionResetError("reset by peer"),
        RuntimeError("network unreachable"),
        RuntimeError("ECONNRESET while reading"),
    ],
)
def test_connection_errors_are_detected(exc) -> None:
    assert is_connection_error(exc)
    error = classify_error(exc, fallback_message="fallo")
    assert error.code == CONNECTION_ERROR
    assert error.retryable is True


def test_value_errors_are_validation_errors() -> None:
    error = classify_error(ValueError("Datos incompletos"), fallback_message="fallo")

    assert error.code == VALIDATION_ERROR
    assert error.message == "Datos incompletos"


def test_other_errors_are_persistence_errors() -> None:
    error = classify_error(RuntimeError("constraint failed"), fallback_message="fallo")

    assert error.code == PERSISTENCE_ERROR
    assert error.message == "fallo"
    assert error.details == "constraint failed"
    assert error.retryable is False


def test_service_result_helpers() -> None:
    ok = ServiceResult.success(1)
    failed = ServiceResult.failure(VALIDATION_ERROR, "mal")

    assert ok.ok and ok.data == 1
    assert not failed.ok and failed.error.message == "mal"
