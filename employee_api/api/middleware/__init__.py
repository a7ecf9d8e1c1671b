"""Middleware for cross-cutting request concerns.

The application declares its middleware as one ordered list, outermost
first:

1. **MetricsMiddleware**: one Prometheus observation per request
2. **RecoveryMiddleware**: converts unhandled exceptions into 500 responses
3. **RequestLoggingMiddleware**: one structured log line per request

Domain, validation and HTTP errors raised inside route handlers are turned
into ``ErrorResponse`` bodies by the handlers in ``error_handler``.
"""
