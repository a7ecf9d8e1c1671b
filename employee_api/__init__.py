"""Employee API - HTTP service for managing employee records.

The service is a FastAPI application served by Uvicorn. It exposes a
versioned employee CRUD resource, Prometheus metrics and Swagger UI
documentation.

Architecture Overview:
- **API Layer**: FastAPI application factory, middleware chain, routes, docs
- **Core Layer**: Configuration, logging, request context and exceptions
- **Infrastructure Layer**: Async PostgreSQL persistence with SQLAlchemy

Every request travels the same middleware chain (metrics, recovery,
request logging) before it reaches a route handler, so a failing handler
degrades to a 500 response without taking the process down.
"""
