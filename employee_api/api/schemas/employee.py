"""Request and response schemas for the employee resource."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from employee_api.infrastructure.database.models import EmployeeStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class EmployeeBase(BaseModel):
    """Fields shared by create requests and responses."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Jane Doe"])
    email: str = Field(
        ...,
        max_length=320,
        pattern=EMAIL_PATTERN,
        examples=["jane.doe@example.com"],
    )
    phone_number: str | None = Field(
        default=None, max_length=32, examples=["+1-202-555-0101"]
    )
    designation: str = Field(
        ..., min_length=1, max_length=128, examples=["DevOps Engineer"]
    )
    department: str = Field(
        ..., min_length=1, max_length=128, examples=["Platform"]
    )
    office_location: str = Field(
        ..., min_length=1, max_length=128, examples=["Delhi"]
    )
    address: str | None = Field(default=None, max_length=512)
    joining_date: date = Field(..., examples=["2023-04-01"])
    status: EmployeeStatus = Field(default=EmployeeStatus.ACTIVE)


class EmployeeCreate(EmployeeBase):
    """Payload for creating an employee."""

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class EmployeeUpdate(BaseModel):
    """Partial update payload; only the fields sent are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=320, pattern=EMAIL_PATTERN)
    phone_number: str | None = Field(default=None, max_length=32)
    designation: str | None = Field(default=None, min_length=1, max_length=128)
    department: str | None = Field(default=None, min_length=1, max_length=128)
    office_location: str | None = Field(default=None, min_length=1, max_length=128)
    address: str | None = Field(default=None, max_length=512)
    joining_date: date | None = None
    status: EmployeeStatus | None = None

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else v


class EmployeeResponse(EmployeeBase):
    """An employee as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[42])
    created_at: datetime
    updated_at: datetime


class HealthResponse(BaseModel):
    """Health status of the employee service."""

    status: str = Field(..., examples=["up", "degraded"])
    service: str = Field(..., examples=["Employee API"])
    version: str = Field(..., examples=["1.0.0"])
    database: bool | None = Field(
        default=None, description="Database reachability (detailed check only)"
    )
    database_error: str | None = None
