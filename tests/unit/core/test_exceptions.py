"""Unit tests for the exceptions module."""

import pytest

from employee_api.core.exceptions import (
    ConflictError,
    EmployeeApiError,
    ErrorCode,
    NotFoundError,
    Severity,
    ValidationError,
)


@pytest.mark.unit
class TestEmployeeApiError:
    """Test the base exception."""

    def test_accepts_enum_error_code(self) -> None:
        error = EmployeeApiError(ErrorCode.INTERNAL_ERROR, "boom")

        assert error.error_code == "INTERNAL_ERROR"
        assert error.message == "boom"
        assert error.severity == Severity.MEDIUM
        assert error.context == {}
        assert error.cause is None

    def test_accepts_string_error_code(self) -> None:
        error = EmployeeApiError("CUSTOM", "custom failure")

        assert error.error_code == "CUSTOM"
        assert str(error) == "[CUSTOM] custom failure"

    def test_cause_is_chained(self) -> None:
        cause = ValueError("bad value")

        error = EmployeeApiError(ErrorCode.INTERNAL_ERROR, "wrapped", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_repr_includes_context(self) -> None:
        error = EmployeeApiError(
            ErrorCode.NOT_FOUND, "missing", Severity.LOW, context={"id": 7}
        )

        assert repr(error) == (
            "EmployeeApiError(error_code='NOT_FOUND', message='missing', "
            "severity=LOW, context={'id': 7})"
        )

    @pytest.mark.parametrize(
        ("severity", "expected"),
        [
            (Severity.LOW, True),
            (Severity.MEDIUM, True),
            (Severity.HIGH, False),
            (Severity.CRITICAL, False),
        ],
    )
    def test_is_expected(self, severity: Severity, expected: bool) -> None:
        error = EmployeeApiError(ErrorCode.INTERNAL_ERROR, "x", severity)

        assert error.is_expected is expected


@pytest.mark.unit
class TestSpecializedExceptions:
    """Test the specialized exception classes."""

    @pytest.mark.parametrize(
        ("exception_class", "error_code", "severity"),
        [
            (ValidationError, "VALIDATION_ERROR", Severity.LOW),
            (NotFoundError, "NOT_FOUND", Severity.LOW),
            (ConflictError, "CONFLICT", Severity.MEDIUM),
        ],
    )
    def test_defaults(
        self,
        exception_class: type[EmployeeApiError],
        error_code: str,
        severity: Severity,
    ) -> None:
        error = exception_class("something happened")

        assert isinstance(error, EmployeeApiError)
        assert error.error_code == error_code
        assert error.severity == severity

    def test_context_is_kept(self) -> None:
        error = NotFoundError("Employee 3 not found", context={"employee_id": 3})

        assert error.context == {"employee_id": 3}
