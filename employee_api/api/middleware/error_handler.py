"""Exception handlers translating errors into ``ErrorResponse`` bodies.

Domain errors, request validation errors and ``HTTPException`` are handled
by FastAPI's exception middleware, inside the middleware chain, so the
request logging and metrics middleware see the final status code.
Unhandled exceptions are not registered here; they propagate to
``RecoveryMiddleware``, which calls ``internal_error_response``.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from employee_api.api.constants import (
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from employee_api.api.schemas.errors import ErrorResponse, ServiceInfo
from employee_api.api.utils.responses import ORJSONResponse
from employee_api.core.config import Settings, get_settings
from employee_api.core.context import RequestContext, generate_request_id
from employee_api.core.error_context import sanitize_error_context
from employee_api.core.exceptions import (
    ConflictError,
    EmployeeApiError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings."""
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def _request_id() -> str:
    return RequestContext.get_request_id() or generate_request_id()


async def employee_api_error_handler(request: Request, exc: Exception) -> Response:
    """Handle EmployeeApiError exceptions.

    Args:
        request: The request that caused the exception
        exc: The EmployeeApiError to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an EmployeeApiError instance
    """
    if not isinstance(exc, EmployeeApiError):
        raise TypeError(f"Expected EmployeeApiError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
            "context": exc.context,
        },
    )
    log = logger.warning if exc.is_expected else logger.error
    log(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        correlation_id=correlation_id,
        **error_context,
    )

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictError):
        status_code = status.HTTP_409_CONFLICT

    debug_info = None
    if settings.environment == "development":
        debug_info = {
            "exception_type": type(exc).__name__,
            "error_context": exc.context,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=exc.context or None,
        correlation_id=correlation_id,
        request_id=_request_id(),
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle RequestValidationError with field-level details.

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    # ['body', 'email'] -> 'email'
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:] if loc != "__root__")
        field_errors.setdefault(field_name or "root", []).append(
            error.get("msg", "Invalid value")
        )

    logger.warning(
        "Request validation failed",
        correlation_id=correlation_id,
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        **sanitize_error_context(
            exc,
            {
                "path": str(request.url.path),
                "method": request.method,
                "validation_errors": field_errors,
            },
        ),
    )

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details={"validation_errors": field_errors},
        correlation_id=correlation_id,
        request_id=_request_id(),
        severity="LOW",
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_response.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException (unknown routes, wrong methods, ...).

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    error_code = ErrorCode.INTERNAL_ERROR.value
    severity = "MEDIUM"
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND.value
        severity = "LOW"
    elif exc.status_code < HTTP_500_INTERNAL_SERVER_ERROR:
        error_code = ErrorCode.VALIDATION_ERROR.value
        severity = "LOW"
    else:
        severity = "HIGH"

    logger.warning(
        "HTTP exception",
        correlation_id=correlation_id,
        **sanitize_error_context(
            exc,
            {
                "status": exc.status_code,
                "method": request.method,
                "path": str(request.url.path),
                "detail": exc.detail,
            },
        ),
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(exc.detail),
        correlation_id=correlation_id,
        request_id=_request_id(),
        severity=severity,
        service_info=get_service_info(settings),
    )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


def internal_error_response(
    exc: Exception,
    *,
    correlation_id: str | None = None,
    request_id: str | None = None,
) -> Response:
    """Build the generic 500 response for an unhandled exception.

    In production the message is generic and no internals are exposed.

    Args:
        exc: The unhandled exception.
        correlation_id: Correlation ID of the failed request, if known.
        request_id: Request ID of the failed request, if known.

    Returns:
        Response: ORJSONResponse with status 500.
    """
    settings = get_settings()

    if settings.environment == "production":
        message = "An internal server error occurred"
        details = None
        debug_info = None
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
        request_id=request_id or generate_request_id(),
        severity="CRITICAL",
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain, validation and HTTP exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(EmployeeApiError, employee_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)

    logger.info("Exception handlers registered")
