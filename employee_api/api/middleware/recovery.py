"""Recovery middleware: the per-request backstop for unhandled exceptions.

Any exception that escapes the inner middleware and route handlers is
logged with its traceback and converted into a 500 ``ErrorResponse``. The
exception never propagates further, so the server keeps serving.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from employee_api.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER
from employee_api.api.middleware.error_handler import internal_error_response
from employee_api.core.error_context import sanitize_error_context


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn unhandled exceptions into 500 responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Run the rest of the chain, recovering from any exception.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The downstream response, or a 500 error response.
        """
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001 - recovery must catch everything
            correlation_id = getattr(request.state, "correlation_id", None)
            request_id = getattr(request.state, "request_id", None)

            logger.opt(exception=exc).error(
                "Recovered from unhandled exception: {exception_type}",
                exception_type=type(exc).__name__,
                correlation_id=correlation_id,
                request_id=request_id,
                **sanitize_error_context(
                    exc,
                    {
                        "request_method": request.method,
                        "request_path": str(request.url.path),
                    },
                ),
            )

            response = internal_error_response(
                exc, correlation_id=correlation_id, request_id=request_id
            )
            if correlation_id:
                response.headers[CORRELATION_ID_HEADER] = correlation_id
            if request_id:
                response.headers[REQUEST_ID_HEADER] = request_id
            return response
