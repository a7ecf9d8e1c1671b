"""Sensitive data sanitization for error logging and responses.

Field names are matched against a default pattern and against the
``log_config.sensitive_fields`` setting; matching values are replaced with
``[REDACTED]``. Nested dicts, lists and tuples are walked up to
``MAX_DEPTH`` levels.
"""

from __future__ import annotations

import re
from re import Pattern
from typing import Any, Final

from employee_api.core.config import get_settings
from employee_api.core.constants import REDACTED

type SanitizableValue = (
    str | int | float | bool | None | dict[str, Any] | list[Any] | tuple[Any, ...]
)

DEFAULT_SENSITIVE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(password|passwd|pwd|secret|token|api[_-]?key|apikey|auth|authorization|"
    r"credential|private[_-]?key|access[_-]?key|session|ssn|"
    r"social[_-]?security|card[_-]?number|connection[_-]?string)",
    re.IGNORECASE,
)

MAX_DEPTH: Final[int] = 10


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates sensitive data.

    Args:
        field_name: The field name to check.

    Returns:
        bool: True if the field appears to contain sensitive data.
    """
    if DEFAULT_SENSITIVE_PATTERN.search(field_name):
        return True

    field_lower = field_name.lower()
    return any(
        sensitive.lower() in field_lower
        for sensitive in get_settings().log_config.sensitive_fields
    )


def sanitize_value(
    value: SanitizableValue, field_name: str = "", depth: int = 0
) -> SanitizableValue:
    """Redact ``value`` when ``field_name`` is sensitive, recursing into containers.

    Args:
        value: The value to potentially sanitize.
        field_name: The field name for context.
        depth: Current recursion depth.

    Returns:
        SanitizableValue: Sanitized value or original if not sensitive.
    """
    if depth > MAX_DEPTH:
        return REDACTED

    if field_name and is_sensitive_field(field_name):
        return REDACTED

    if isinstance(value, dict):
        return {k: sanitize_value(v, k, depth + 1) for k, v in value.items()}

    if isinstance(value, list):
        return [sanitize_value(item, "", depth + 1) for item in value]

    if isinstance(value, tuple):
        return tuple(sanitize_value(item, "", depth + 1) for item in value)

    return value


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted."""
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_error_context(
    error: Exception, context: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Create sanitized error context for logging.

    Args:
        error: The exception to create context for.
        context: Additional context to include (will be sanitized).

    Returns:
        dict[str, Any]: Sanitized error context safe for logging.
    """
    error_context: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        error_context.update(sanitize_dict(context))

    return error_context
