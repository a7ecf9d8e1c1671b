"""HTTP API layer built on FastAPI.

Key components:
- **main**: Application factory, lifespan and the module-level ``app``
- **middleware**: Metrics, recovery and request logging, plus the
  exception handlers that render ``ErrorResponse`` bodies
- **routes**: The employee resource, mounted under the versioned prefix
- **docs**: Swagger UI and the per-request OpenAPI description
- **schemas**: Pydantic models for requests, responses and errors
- **utils**: orjson-backed JSON responses
"""
