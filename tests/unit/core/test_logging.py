"""Unit tests for the Loguru logging setup."""

import json
import logging
import sys
from typing import Any

import pytest
from loguru import logger
from pytest_mock import MockerFixture

from employee_api.core.config import Settings
from employee_api.core.logging import (
    InterceptHandler,
    _json_sink,
    _state,
    format_console_with_context,
    serialize_for_json,
    setup_logging,
)


def _last_record(records: list[dict[str, Any]], message: str) -> dict[str, Any]:
    return next(r for r in reversed(records) if r["message"] == message)


@pytest.mark.unit
class TestSerializeForJson:
    """Test the JSON formatter."""

    def test_includes_standard_and_extra_fields(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        logger.bind(correlation_id="abc-123", status_code=201).info("json test")
        record = _last_record(log_records, "json test")

        entry = json.loads(serialize_for_json(record))

        assert entry["message"] == "json test"
        assert entry["level"] == "INFO"
        assert entry["correlation_id"] == "abc-123"
        assert entry["status_code"] == 201
        for key in ("timestamp", "logger", "function", "module", "line"):
            assert key in entry

    def test_includes_exception(self, log_records: list[dict[str, Any]]) -> None:
        try:
            raise ValueError("bad input")
        except ValueError:
            logger.exception("failure test")
        record = _last_record(log_records, "failure test")

        entry = json.loads(serialize_for_json(record))

        assert entry["exception"] == {"type": "ValueError", "value": "bad input"}

    def test_output_is_one_line(self, log_records: list[dict[str, Any]]) -> None:
        logger.info("line test")

        output = serialize_for_json(_last_record(log_records, "line test"))

        assert output.endswith("\n")
        assert output.count("\n") == 1


@pytest.mark.unit
class TestFormatConsoleWithContext:
    """Test the console formatter."""

    def test_priority_fields_are_highlighted(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        logger.bind(correlation_id="1234567890abcdef", duration_ms=12.5).info(
            "console test"
        )

        line = format_console_with_context(_last_record(log_records, "console test"))

        assert "<yellow>12345678</yellow>" in line
        assert "<yellow>12.5ms</yellow>" in line
        assert line.endswith("console test\n")

    def test_other_fields_are_dimmed(self, log_records: list[dict[str, Any]]) -> None:
        logger.bind(employee_id=7).info("dim test")

        line = format_console_with_context(_last_record(log_records, "dim test"))

        assert "<dim>employee_id=7</dim>" in line

    def test_braces_in_message_are_escaped(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        logger.info("payload {}", "{'a': 1}")

        line = format_console_with_context(
            _last_record(log_records, "payload {'a': 1}")
        )

        assert "payload {{'a': 1}}" in line


@pytest.mark.unit
class TestInterceptHandler:
    """Test forwarding of standard library records."""

    def test_forwards_to_loguru(self, log_records: list[dict[str, Any]]) -> None:
        std_logger = logging.getLogger("tests.intercept")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(logging.INFO)

        std_logger.warning("hello %s", "there")

        record = _last_record(log_records, "hello there")
        assert record["level"].name == "WARNING"

    def test_unknown_level_uses_number(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        std_logger = logging.getLogger("tests.intercept.custom")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(1)

        std_logger.log(25, "custom level")

        record = _last_record(log_records, "custom level")
        assert record["level"].no == 25


@pytest.mark.unit
class TestSetupLogging:
    """Test setup_logging."""

    @pytest.mark.parametrize(
        ("environment", "expects_stdout"),
        [
            ("development", True),
            ("production", False),
        ],
    )
    def test_configures_sink_once(
        self,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
        environment: str,
        expects_stdout: bool,
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", environment)
        mocker.patch.object(_state, "configured", False)
        mock_logger = mocker.patch("employee_api.core.logging.logger")
        mocker.patch("employee_api.core.logging.logging.basicConfig")

        settings = Settings()
        setup_logging(settings)
        setup_logging(settings)

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()
        call = mock_logger.add.call_args
        assert call.kwargs["level"] == "INFO"
        assert call.kwargs["enqueue"] is True
        expected_sink = sys.stdout if expects_stdout else _json_sink
        assert call.args[0] is expected_sink

    def test_routes_uvicorn_loggers(self, mocker: MockerFixture) -> None:
        mocker.patch.object(_state, "configured", False)
        mocker.patch("employee_api.core.logging.logger")
        mocker.patch("employee_api.core.logging.logging.basicConfig")

        setup_logging(Settings())

        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            std_logger = logging.getLogger(name)
            assert any(isinstance(h, InterceptHandler) for h in std_logger.handlers)
            assert std_logger.propagate is False
