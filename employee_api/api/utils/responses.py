"""JSON response class using orjson serialization.

``ORJSONResponse`` is the default response class of the application, so
route handlers, error handlers and the documentation route all render JSON
the same way (dates and datetimes as ISO 8601, keys sorted).
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """JSONResponse rendered with orjson."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)
