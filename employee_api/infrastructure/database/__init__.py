"""Database infrastructure with async PostgreSQL and repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: The employee table
- **session**: Async engine and session management
- **repository**: Generic repository with CRUD operations
- **employee_repository**: Employee-specific queries
- **dependencies**: FastAPI dependency injection helpers
"""

from employee_api.infrastructure.database.base import Base, BaseModel
from employee_api.infrastructure.database.dependencies import (
    DatabaseSession,
    EmployeeRepositoryDep,
    get_db,
    get_employee_repository,
)
from employee_api.infrastructure.database.employee_repository import (
    EmployeeRepository,
)
from employee_api.infrastructure.database.models import Employee, EmployeeStatus
from employee_api.infrastructure.database.repository import BaseRepository
from employee_api.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    get_async_session,
    get_engine,
    get_session_factory,
    init_database,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "DatabaseSession",
    "Employee",
    "EmployeeRepository",
    "EmployeeRepositoryDep",
    "EmployeeStatus",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "get_async_session",
    "get_db",
    "get_employee_repository",
    "get_engine",
    "get_session_factory",
    "init_database",
]
