"""Standardized error response schema.

Every error the API returns, whether raised by a route handler, produced by
request validation or caught by the recovery middleware, is rendered as an
``ErrorResponse``.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Identifies the service that produced an error."""

    name: str = Field(..., description="Name of the service", examples=["Employee API"])
    version: str = Field(..., description="Version of the service", examples=["1.0.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "CONFLICT", "INTERNAL_ERROR"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Employee 42 not found"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details (e.g., field-specific validation errors)",
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    request_id: str | None = Field(
        default=None,
        description="Unique identifier of the failed request",
        examples=["req-660e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level",
        examples=["LOW", "CRITICAL"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "NOT_FOUND",
                    "message": "Employee 42 not found",
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440001",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440001",
                    "timestamp": "2024-06-14T12:00:01+00:00",
                    "severity": "LOW",
                    "service_info": {
                        "name": "Employee API",
                        "version": "1.0.0",
                        "environment": "production",
                    },
                },
                {
                    "error_code": "INTERNAL_ERROR",
                    "message": "An internal server error occurred",
                    "timestamp": "2024-06-14T12:00:03+00:00",
                    "severity": "CRITICAL",
                },
            ]
        }
    }
