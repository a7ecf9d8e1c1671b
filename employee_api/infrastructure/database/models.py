"""Database models for the employee resource."""

from datetime import date
from enum import Enum

from sqlalchemy import Date, String
from sqlalchemy import Enum as SqlEnum
from sqlalchemy.orm import Mapped, mapped_column

from employee_api.infrastructure.database.base import BaseModel


class EmployeeStatus(str, Enum):
    """Employment status of an employee."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"


class Employee(BaseModel):
    """An employee record."""

    __tablename__ = "employees"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True
    )
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    designation: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    department: Mapped[str] = mapped_column(String(128), nullable=False)
    office_location: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[EmployeeStatus] = mapped_column(
        SqlEnum(
            EmployeeStatus,
            name="employee_status",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )
