"""API-related constants."""

from employee_api.core.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER

__all__ = [
    "CORRELATION_ID_HEADER",
    "HTTP_422_UNPROCESSABLE_CONTENT",
    "HTTP_500_INTERNAL_SERVER_ERROR",
    "MAX_PAGE_SIZE",
    "MAX_USER_AGENT_LENGTH",
    "REQUEST_ID_HEADER",
    "SWAGGER_DOC_FILE",
    "SWAGGER_INDEX_FILE",
]

HTTP_422_UNPROCESSABLE_CONTENT = 422
HTTP_500_INTERNAL_SERVER_ERROR = 500

# Pagination
MAX_PAGE_SIZE = 100

# Request logging
MAX_USER_AGENT_LENGTH = 200

# Documentation assets served under the docs route prefix
SWAGGER_INDEX_FILE = "index.html"
SWAGGER_DOC_FILE = "doc.json"
