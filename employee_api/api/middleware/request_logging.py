"""HTTP request logging with correlation IDs.

Every request produces exactly one access line: ``Request completed`` with
the status code, or ``Request failed`` when an exception escapes the route
(the exception is re-raised for the recovery middleware). Each line carries
method, path, status code, duration, client address and the request's
correlation and request IDs; requests slower than the configured threshold
are marked ``slow=True``.

The correlation ID is taken from ``X-Correlation-ID`` or generated, stored
in ``RequestContext`` for handlers, bound to every log emitted during the
request, and echoed on the response.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from employee_api.api.constants import (
    CORRELATION_ID_HEADER,
    HTTP_500_INTERNAL_SERVER_ERROR,
    MAX_USER_AGENT_LENGTH,
    REQUEST_ID_HEADER,
)
from employee_api.core.config import LogConfig
from employee_api.core.constants import MILLISECONDS_PER_SECOND
from employee_api.core.context import (
    RequestContext,
    generate_correlation_id,
    generate_request_id,
)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests.

    Args:
        app: The ASGI application.
        log_config: Logging configuration.
        slow_time_seconds: Requests slower than this are marked slow.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        log_config: LogConfig,
        slow_time_seconds: float,
    ) -> None:
        super().__init__(app)
        self.log_config = log_config
        self.excluded_paths = set(log_config.excluded_paths)
        self.slow_threshold_ms = slow_time_seconds * MILLISECONDS_PER_SECOND

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        if request.client:
            return request.client.host
        return "unknown"

    @staticmethod
    def _get_user_agent(request: Request) -> str:
        ua = request.headers.get("user-agent", "")
        return ua[:MAX_USER_AGENT_LENGTH] if ua else "unknown"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request and log one line for it.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The response from the application.

        Raises:
            Exception: Any exception raised by the application is re-raised
                after logging.
        """
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        )
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()

        RequestContext.set_correlation_id(correlation_id)
        RequestContext.set_request_id(request_id)
        # Read by the recovery middleware, which runs outside this context
        request.state.correlation_id = correlation_id
        request.state.request_id = request_id

        if request.url.path in self.excluded_paths:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        with logger.contextualize(
            correlation_id=correlation_id,
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=self._get_client_ip(request),
            user_agent=self._get_user_agent(request),
        ):
            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                elapsed = time.perf_counter() - start_time
                duration_ms = elapsed * MILLISECONDS_PER_SECOND
                logger.error(
                    "Request failed",
                    status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                    duration_ms=round(duration_ms, 2),
                    slow=duration_ms > self.slow_threshold_ms,
                    error_type=type(exc).__name__,
                )
                raise

            elapsed = time.perf_counter() - start_time
            duration_ms = elapsed * MILLISECONDS_PER_SECOND
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                slow=duration_ms > self.slow_threshold_ms,
                response_size=int(response.headers.get("content-length", 0)),
            )

            response.headers[CORRELATION_ID_HEADER] = correlation_id
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
