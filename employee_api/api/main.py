"""FastAPI application initialization and configuration module.

``create_app`` performs the startup sequence in order:

1. Initialize logging
2. Construct the application (production mode unless ``debug`` is set)
3. Attach the metrics collector and the middleware chain
4. Register exception handlers
5. Register the versioned API group with the employee routes
6. Register the documentation route

Middleware is declared as one ordered list, outermost first: metrics wraps
recovery, which wraps request logging, which wraps the route handlers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware import Middleware

from employee_api.api.docs import create_docs_router
from employee_api.api.middleware.error_handler import register_exception_handlers
from employee_api.api.middleware.metrics import MetricsMiddleware, MetricsMonitor
from employee_api.api.middleware.recovery import RecoveryMiddleware
from employee_api.api.middleware.request_logging import RequestLoggingMiddleware
from employee_api.api.routes import create_router_for_employee
from employee_api.api.utils.responses import ORJSONResponse
from employee_api.core.config import Settings, get_settings
from employee_api.core.logging import setup_logging
from employee_api.infrastructure.database.session import (
    check_database_connection,
    close_database,
    init_database,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    An unreachable database is logged and tolerated: metrics and
    documentation keep working and employee routes fail per request until
    the database is back.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.
    """
    settings: Settings = app_instance.state.settings
    is_healthy, error_msg = await check_database_connection()

    if is_healthy:
        logger.info("Database connection successful")
        if settings.database_config.create_tables_on_startup:
            try:
                await init_database()
            except SQLAlchemyError as e:
                logger.warning("Database schema initialization failed: {}", e)
    else:
        logger.warning("Database unavailable during startup: {}", error_msg)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    monitor = MetricsMonitor(settings.metrics_config)
    middleware = [
        Middleware(MetricsMiddleware, monitor=monitor),
        Middleware(RecoveryMiddleware),
        Middleware(
            RequestLoggingMiddleware,
            log_config=settings.log_config,
            slow_time_seconds=settings.metrics_config.slow_time_seconds,
        ),
    ]

    application = FastAPI(
        title=settings.docs_config.title,
        description=settings.docs_config.description,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        default_response_class=ORJSONResponse,
        middleware=middleware,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.metrics_monitor = monitor

    register_exception_handlers(application)

    monitor.expose(application)

    v1 = APIRouter(prefix=settings.api_prefix)
    create_router_for_employee(v1)
    application.include_router(v1)

    if settings.docs_config.enabled:
        application.include_router(
            create_docs_router(application, settings.docs_config)
        )

    logger.info(
        "Application configured - {} v{} ({})",
        settings.app_name,
        settings.app_version,
        settings.environment,
    )

    return application


app = create_app()
