"""Prometheus metrics collector for HTTP traffic.

``MetricsMonitor`` owns a private ``CollectorRegistry`` holding the request
counters, the latency histogram and the slow-request counter, and serves
them in the Prometheus text format at the configured path.
``MetricsMiddleware`` is the outermost middleware, so every request,
including ones that end in a recovered 500, is observed exactly once.

Collected series (``<ns>`` is ``MetricsConfig.namespace``):

- ``<ns>_requests_total``: all requests
- ``<ns>_uri_requests_total{uri,method,code}``: requests per route
- ``<ns>_request_duration_seconds{uri}``: latency histogram
- ``<ns>_slow_requests_total{uri,method,code}``: requests over the slow time
- ``<ns>_request_body_bytes_total`` / ``<ns>_response_body_bytes_total``
- ``<ns>_slow_request_threshold_seconds``: the configured slow time
"""

import time
from collections.abc import Awaitable, Callable, Mapping

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from employee_api.api.constants import HTTP_500_INTERNAL_SERVER_ERROR
from employee_api.core.config import MetricsConfig

# Label shared by every request that matched no route
UNMATCHED_ROUTE_LABEL = ""


class MetricsMonitor:
    """Registry and metric definitions for one application instance.

    Args:
        config: Metrics configuration (path, namespace, slow time, buckets).
    """

    def __init__(self, config: MetricsConfig) -> None:
        self.config = config
        self.registry = CollectorRegistry(auto_describe=True)
        namespace = config.namespace

        self.requests_total = Counter(
            "requests",
            "Total number of HTTP requests",
            namespace=namespace,
            registry=self.registry,
        )
        self.uri_requests_total = Counter(
            "uri_requests",
            "Number of HTTP requests per route, method and status code",
            ["uri", "method", "code"],
            namespace=namespace,
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "request_duration_seconds",
            "HTTP request latency in seconds",
            ["uri"],
            buckets=config.duration_buckets,
            namespace=namespace,
            registry=self.registry,
        )
        self.slow_requests_total = Counter(
            "slow_requests",
            f"Number of HTTP requests slower than {config.slow_time_seconds}s",
            ["uri", "method", "code"],
            namespace=namespace,
            registry=self.registry,
        )
        self.request_body_bytes = Counter(
            "request_body_bytes",
            "Total size of HTTP request bodies in bytes",
            namespace=namespace,
            registry=self.registry,
        )
        self.response_body_bytes = Counter(
            "response_body_bytes",
            "Total size of HTTP response bodies in bytes",
            namespace=namespace,
            registry=self.registry,
        )
        self.slow_threshold = Gauge(
            "slow_request_threshold_seconds",
            "Latency above which a request is counted as slow",
            namespace=namespace,
            registry=self.registry,
        )
        self.slow_threshold.set(config.slow_time_seconds)

    @property
    def metrics_path(self) -> str:
        return self.config.metrics_path

    def observe(
        self,
        *,
        uri: str,
        method: str,
        status_code: int,
        duration_seconds: float,
        request_size: int = 0,
        response_size: int = 0,
    ) -> None:
        """Record one finished request."""
        code = str(status_code)
        self.requests_total.inc()
        self.uri_requests_total.labels(uri=uri, method=method, code=code).inc()
        self.request_duration.labels(uri=uri).observe(duration_seconds)
        if duration_seconds > self.config.slow_time_seconds:
            self.slow_requests_total.labels(uri=uri, method=method, code=code).inc()
        if request_size > 0:
            self.request_body_bytes.inc(request_size)
        if response_size > 0:
            self.response_body_bytes.inc(response_size)

    def render(self) -> Response:
        """Render the registry in the Prometheus text exposition format."""
        return Response(
            content=generate_latest(self.registry),
            media_type=CONTENT_TYPE_LATEST,
        )

    def expose(self, app: FastAPI) -> None:
        """Mount the exposition endpoint on ``app`` at the metrics path."""

        async def metrics() -> Response:
            return self.render()

        app.add_api_route(
            self.metrics_path,
            metrics,
            methods=["GET"],
            include_in_schema=False,
        )


def _route_template(request: Request, app_root_path: str) -> str:
    """Return the full template of the matched route.

    Routers included under a prefix may be mounted, in which case the route
    path is relative and routing has appended the prefix to ``root_path``.
    Unmatched requests share ``UNMATCHED_ROUTE_LABEL`` so that arbitrary
    paths cannot create new series.
    """
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if not path:
        return UNMATCHED_ROUTE_LABEL

    mount_prefix = request.scope.get("root_path", "").removeprefix(app_root_path)
    return mount_prefix + path


def _content_length(headers: Mapping[str, str]) -> int:
    try:
        return int(headers.get("content-length", 0))
    except ValueError:
        return 0


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record one observation per request into a ``MetricsMonitor``.

    Args:
        app: The ASGI application.
        monitor: The monitor receiving the observations.
    """

    def __init__(self, app: ASGIApp, *, monitor: MetricsMonitor) -> None:
        super().__init__(app)
        self.monitor = monitor

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Time the request and record it once it has a status code.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The downstream response, unchanged.
        """
        start_time = time.perf_counter()
        request_size = _content_length(request.headers)
        app_root_path = request.scope.get("root_path", "")

        try:
            response = await call_next(request)
        except Exception:
            self.monitor.observe(
                uri=_route_template(request, app_root_path),
                method=request.method,
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                duration_seconds=time.perf_counter() - start_time,
                request_size=request_size,
            )
            raise

        self.monitor.observe(
            uri=_route_template(request, app_root_path),
            method=request.method,
            status_code=response.status_code,
            duration_seconds=time.perf_counter() - start_time,
            request_size=request_size,
            response_size=_content_length(response.headers),
        )
        return response
