"""Structured logging with Loguru.

Two formatters are available:

- **console**: human-readable lines with inline request context (development)
- **json**: one JSON object per line, every bound field at the top level

``setup_logging`` is called explicitly from the startup sequence before any
request is served; it configures the process-wide Loguru logger once and
routes the standard library (including Uvicorn's loggers) through it.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Final, Protocol, cast

from loguru import logger


class _LoggingState:
    """Tracks whether logging has been configured."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def debug(self) -> bool:
        """Debug mode flag."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...


CONSOLE_PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "correlation_id",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
)
CORRELATION_ID_DISPLAY_LENGTH: Final[int] = 8
MAX_FIELD_VALUE_LENGTH: Final[int] = 100


def _escape(value: object) -> str:
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_console_field(key: str, value: object) -> str:
    if key == "correlation_id" and len(str(value)) > CORRELATION_ID_DISPLAY_LENGTH:
        value = str(value)[:CORRELATION_ID_DISPLAY_LENGTH]
    elif key == "duration_ms":
        value = f"{value}ms"

    text = str(value)
    if len(text) > MAX_FIELD_VALUE_LENGTH:
        text = text[: MAX_FIELD_VALUE_LENGTH - 3] + "..."

    if key in CONSOLE_PRIORITY_FIELDS:
        return f"<yellow>{_escape(text)}</yellow>"
    return f"<dim>{_escape(key)}={_escape(text)}</dim>"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Format a record for the console with all context fields visible.

    Args:
        record: Loguru record to format.

    Returns:
        str: Loguru format string for this record.
    """
    parts = [
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level: <8}</level>",
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>",
    ]

    extra: dict[str, Any] = record.get("extra", {})
    ordered = [k for k in CONSOLE_PRIORITY_FIELDS if extra.get(k) is not None]
    ordered += [
        k
        for k, v in extra.items()
        if k not in CONSOLE_PRIORITY_FIELDS and not k.startswith("_") and v is not None
    ]
    if ordered:
        parts.append(
            " ".join(f"[{_format_console_field(k, extra[k])}]" for k in ordered)
        )

    parts.append(_escape(record.get("message", "")))

    line = " | ".join(parts) + "\n"
    if record.get("exception"):
        line += "{exception}"
    return line


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format a record as a single JSON line.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "module": record["module"],
        "line": record["line"],
    }

    if extra := record.get("extra", {}):
        log_entry.update({k: v for k, v in extra.items() if not k.startswith("_")})

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return json.dumps(log_entry, default=str) + "\n"


class InterceptHandler(logging.Handler):
    """Forward standard library log records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module
        try:
            frame, depth = sys._getframe(6), 6  # noqa: SLF001
            while frame and frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back  # type: ignore[assignment]
                depth += 1
        except ValueError:
            depth = 1

        extra: dict[str, Any] = {}
        if record.name == "uvicorn.access" and hasattr(record, "scope"):
            scope = record.scope
            extra["method"] = scope.get("method", "")
            extra["path"] = scope.get("path", "")

        logger.opt(depth=depth, exception=record.exc_info).bind(**extra).log(
            level, record.getMessage()
        )


def _json_sink(message: object) -> None:
    record = getattr(message, "record", None)
    if record is not None:
        sys.stdout.write(serialize_for_json(record))
        sys.stdout.flush()


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru once for the whole process.

    Args:
        settings: Application settings containing log configuration.
    """
    if _state.configured:
        return

    logger.remove()

    formatter_type = settings.log_config.log_formatter_type or "json"

    if formatter_type == "console":
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=settings.log_config.log_level,
            enqueue=True,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )
    else:
        logger.add(
            _json_sink,
            level=settings.log_config.log_level,
            enqueue=True,
            diagnose=False,
            backtrace=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.handlers = [InterceptHandler()]
        uvicorn_logger.propagate = False

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        formatter_type=formatter_type,
        log_level=settings.log_config.log_level,
    )

    _state.configured = True
