"""Route registrars for the versioned API group."""

from employee_api.api.routes.employee import create_router_for_employee

__all__ = ["create_router_for_employee"]
