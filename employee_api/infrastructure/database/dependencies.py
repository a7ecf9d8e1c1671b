"""FastAPI dependencies for database sessions and repositories.

Route handlers declare ``EmployeeRepositoryDep`` and receive a repository
bound to a request-scoped session that is committed when the handler
returns and rolled back if it raises.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.infrastructure.database.employee_repository import (
    EmployeeRepository,
)
from employee_api.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a database session for the duration of a request."""
    async with get_async_session() as session:
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


async def get_employee_repository(db: DatabaseSession) -> EmployeeRepository:
    """Provide an employee repository bound to the request's session."""
    return EmployeeRepository(db)


EmployeeRepositoryDep = Annotated[EmployeeRepository, Depends(get_employee_repository)]
