"""Core application constants."""

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Security and redaction
REDACTED = "[REDACTED]"

# Request correlation
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
