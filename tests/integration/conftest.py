"""Shared fixtures for integration tests.

The application is exercised end to end through httpx's ASGI transport. The
employee repository dependency is replaced with an in-memory fake so no
database is needed; the lifespan is not run by the transport.
"""

from collections.abc import AsyncGenerator, Callable, Mapping
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from employee_api.api.main import create_app
from employee_api.api.middleware.metrics import MetricsMonitor
from employee_api.core.config import Settings
from employee_api.infrastructure.database.dependencies import get_employee_repository
from employee_api.infrastructure.database.models import Employee


class FakeEmployeeRepository:
    """Dict-backed stand-in for EmployeeRepository."""

    def __init__(self) -> None:
        self.rows: dict[int, Employee] = {}
        self.failure: Exception | None = None
        self.write_failure: Exception | None = None
        self._next_id = 1

    def _check(self) -> None:
        if self.failure is not None:
            raise self.failure

    async def get_by_id(self, entity_id: int) -> Employee | None:
        self._check()
        return self.rows.get(entity_id)

    async def get_by_email(self, email: str) -> Employee | None:
        self._check()
        return next(
            (row for row in self.rows.values() if row.email == email.lower()), None
        )

    async def search(
        self,
        *,
        designation: str | None = None,
        office_location: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Employee]:
        self._check()
        rows = [
            row
            for _, row in sorted(self.rows.items())
            if (designation is None or row.designation == designation)
            and (office_location is None or row.office_location == office_location)
        ]
        return rows[skip : skip + limit]

    async def create(self, obj: Employee) -> Employee:
        self._check()
        if self.write_failure is not None:
            raise self.write_failure
        now = datetime.now(UTC)
        obj.id = self._next_id
        obj.created_at = now
        obj.updated_at = now
        self.rows[obj.id] = obj
        self._next_id += 1
        return obj

    async def update(
        self, entity_id: int, data: Mapping[str, object]
    ) -> Employee | None:
        self._check()
        if self.write_failure is not None:
            raise self.write_failure
        row = self.rows.get(entity_id)
        if row is None:
            return None
        for key, value in data.items():
            setattr(row, key, value)
        row.updated_at = datetime.now(UTC)
        return row

    async def delete(self, entity_id: int) -> bool:
        self._check()
        return self.rows.pop(entity_id, None) is not None


AppFactoryType = Callable[..., FastAPI]


@pytest.fixture
def repository() -> FakeEmployeeRepository:
    return FakeEmployeeRepository()


@pytest.fixture
def app_factory(repository: FakeEmployeeRepository) -> AppFactoryType:
    """Build fresh applications, optionally with custom settings.

    Each application gets its own metrics registry and the shared fake
    repository.
    """

    def _create_app(settings: Settings | None = None) -> FastAPI:
        application = create_app(settings)
        application.dependency_overrides[get_employee_repository] = lambda: repository
        return application

    return _create_app


@pytest.fixture
def app(app_factory: AppFactoryType) -> FastAPI:
    return app_factory()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def monitor(app: FastAPI) -> MetricsMonitor:
    return app.state.metrics_monitor


@pytest.fixture
def employee_payload() -> dict[str, object]:
    return {
        "name": "Jane Doe",
        "email": "Jane.Doe@Example.com",
        "phone_number": "+1-202-555-0101",
        "designation": "DevOps Engineer",
        "department": "Platform",
        "office_location": "Delhi",
        "address": "221B Baker Street",
        "joining_date": "2023-04-01",
    }
