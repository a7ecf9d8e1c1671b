"""Repository for employee records."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.infrastructure.database.models import Employee
from employee_api.infrastructure.database.repository import (
    DEFAULT_PAGINATION_LIMIT,
    BaseRepository,
)


class EmployeeRepository(BaseRepository[Employee]):
    """Employee persistence with lookups by e-mail and attribute search."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Employee)

    async def get_by_email(self, email: str) -> Employee | None:
        """Look up an employee by e-mail (case-insensitive)."""
        return await self.find_one_by(email=email.lower())

    async def search(
        self,
        *,
        designation: str | None = None,
        office_location: str | None = None,
        skip: int = 0,
        limit: int = DEFAULT_PAGINATION_LIMIT,
    ) -> list[Employee]:
        """List employees, optionally narrowed by designation and location.

        Args:
            designation: Exact designation to match.
            office_location: Exact office location to match.
            skip: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            list[Employee]: Matching employees ordered by ID.
        """
        stmt = select(Employee)
        if designation is not None:
            stmt = stmt.where(Employee.designation == designation)
        if office_location is not None:
            stmt = stmt.where(Employee.office_location == office_location)

        stmt = stmt.order_by(Employee.id).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
