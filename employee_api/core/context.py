"""Request-scoped identifiers shared across middleware, handlers and logs."""

import uuid
from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContext:
    """Async-safe storage for the identifiers of the request being served.

    Values set by the request logging middleware are visible to every
    handler and exception handler that runs inside the same request.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context."""
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context."""
        return _correlation_id_var.get()

    @staticmethod
    def set_request_id(request_id: str) -> None:
        """Set the request ID for the current context."""
        _request_id_var.set(request_id)

    @staticmethod
    def get_request_id() -> str | None:
        """Get the request ID from the current context."""
        return _request_id_var.get()

    @staticmethod
    def clear() -> None:
        """Reset both identifiers."""
        _correlation_id_var.set(None)
        _request_id_var.set(None)


def generate_correlation_id() -> str:
    """Generate a correlation ID (a plain UUID4 string).

    Examples:
        >>> len(generate_correlation_id())
        36
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a request ID in the form ``req-<uuid4>``.

    Examples:
        >>> generate_request_id().startswith("req-")
        True
    """
    return f"req-{uuid.uuid4()}"
