"""Employee resource routes.

``create_router_for_employee`` attaches every employee endpoint to the
versioned API group it is given; the routes live under ``/employee``
relative to that group.
"""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from loguru import logger
from sqlalchemy.exc import IntegrityError

from employee_api.api.constants import MAX_PAGE_SIZE
from employee_api.api.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    HealthResponse,
)
from employee_api.api.schemas.errors import ErrorResponse
from employee_api.core.config import get_settings
from employee_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from employee_api.infrastructure.database.dependencies import EmployeeRepositoryDep
from employee_api.infrastructure.database.models import Employee
from employee_api.infrastructure.database.session import check_database_connection

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
}

# Fields an update may explicitly clear
NULLABLE_FIELDS = frozenset({"phone_number", "address"})

router = APIRouter(prefix="/employee", tags=["employee"])


def _not_found(employee_id: int) -> NotFoundError:
    return NotFoundError(
        f"Employee {employee_id} not found", context={"employee_id": employee_id}
    )


def _email_conflict(
    email: str | None, cause: Exception | None = None
) -> ConflictError:
    return ConflictError(
        "An employee with this e-mail already exists",
        context={"email": email},
        cause=cause,
    )


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check for the employee service."""
    settings = get_settings()
    return HealthResponse(
        status="up", service=settings.app_name, version=settings.app_version
    )


@router.get("/health/detail", response_model=HealthResponse)
async def health_detail() -> HealthResponse:
    """Readiness check including database connectivity.

    An unreachable database reports ``degraded`` rather than failing the
    check, so the service is still seen as running.
    """
    settings = get_settings()
    is_healthy, error_msg = await check_database_connection()
    if not is_healthy:
        logger.warning("Database health check failed: {}", error_msg)

    return HealthResponse(
        status="up" if is_healthy else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        database=is_healthy,
        database_error=error_msg,
    )


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_employee(
    payload: EmployeeCreate, repository: EmployeeRepositoryDep
) -> Employee:
    """Create an employee; e-mail addresses must be unique.

    A concurrent insert that passes the lookup is rejected by the unique
    index and reported as a conflict too.
    """
    if await repository.get_by_email(payload.email) is not None:
        raise _email_conflict(payload.email)
    try:
        return await repository.create(Employee(**payload.model_dump()))
    except IntegrityError as e:
        raise _email_conflict(payload.email, cause=e) from e


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    repository: EmployeeRepositoryDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = MAX_PAGE_SIZE,
    designation: str | None = None,
    office_location: str | None = None,
) -> list[Employee]:
    """List employees, optionally filtered by designation and office location."""
    return await repository.search(
        designation=designation,
        office_location=office_location,
        skip=skip,
        limit=limit,
    )


@router.get(
    "/{employee_id}", response_model=EmployeeResponse, responses=ERROR_RESPONSES
)
async def get_employee(employee_id: int, repository: EmployeeRepositoryDep) -> Employee:
    """Fetch a single employee."""
    employee = await repository.get_by_id(employee_id)
    if employee is None:
        raise _not_found(employee_id)
    return employee


@router.put(
    "/{employee_id}", response_model=EmployeeResponse, responses=ERROR_RESPONSES
)
async def update_employee(
    employee_id: int, payload: EmployeeUpdate, repository: EmployeeRepositoryDep
) -> Employee:
    """Apply a partial update to an employee.

    ``null`` is only accepted for the optional fields; for required fields it
    means "leave unchanged". An update that changes nothing is rejected.
    """
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    if not changes:
        raise ValidationError(
            "No fields to update", context={"employee_id": employee_id}
        )

    if await repository.get_by_id(employee_id) is None:
        raise _not_found(employee_id)

    email = payload.email
    if email is not None:
        existing = await repository.get_by_email(email)
        if existing is not None and existing.id != employee_id:
            raise _email_conflict(email)

    try:
        employee = await repository.update(employee_id, changes)
    except IntegrityError as e:
        raise _email_conflict(email, cause=e) from e
    if employee is None:
        raise _not_found(employee_id)
    return employee


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
)
async def delete_employee(
    employee_id: int, repository: EmployeeRepositoryDep
) -> Response:
    """Delete an employee."""
    if not await repository.delete(employee_id):
        raise _not_found(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_router_for_employee(group: APIRouter) -> None:
    """Attach the employee routes to a versioned API group.

    Args:
        group: Router bound to the API prefix (``/api/v1``).
    """
    group.include_router(router)
