"""Swagger UI and OpenAPI description served under the docs route prefix.

``/swagger/doc.json`` is rendered per request: the application's cached
OpenAPI schema is deep-copied and the copy's ``servers`` entry is set from
the request's own scheme and ``Host`` header. "Try it out" calls therefore
go to whichever hostname the caller used. The cached schema is never
written to, so concurrent requests with different hosts cannot leak into
each other's documents.
"""

import copy
from typing import Any

from fastapi import APIRouter, FastAPI, HTTPException, Request, status
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import RedirectResponse, Response

from employee_api.api.constants import SWAGGER_DOC_FILE, SWAGGER_INDEX_FILE
from employee_api.api.utils.responses import ORJSONResponse
from employee_api.core.config import DocsConfig


def build_openapi_document(
    app: FastAPI, *, host: str, scheme: str, base_path: str
) -> dict[str, Any]:
    """Return a copy of the app's OpenAPI schema bound to ``host``.

    Args:
        app: The application whose routes are described.
        host: Host (and optional port) the caller reached the server through.
        scheme: URL scheme of the caller's request.
        base_path: Base path of the employee resource.

    Returns:
        dict[str, Any]: A fresh OpenAPI document owned by the caller.
    """
    document = copy.deepcopy(app.openapi())
    document["servers"] = [{"url": f"{scheme}://{host}"}]
    document.setdefault("info", {})["x-base-path"] = base_path
    return document


def create_docs_router(app: FastAPI, docs_config: DocsConfig) -> APIRouter:
    """Create the documentation router for ``app``.

    Args:
        app: The application whose OpenAPI schema is served.
        docs_config: Documentation settings.

    Returns:
        APIRouter: Router serving the UI and the description document.
    """
    prefix = docs_config.route_prefix.rstrip("/")
    doc_url = f"{prefix}/{SWAGGER_DOC_FILE}"
    router = APIRouter(include_in_schema=False)

    @router.get(prefix)
    async def swagger_root() -> Response:
        return RedirectResponse(url=f"{prefix}/{SWAGGER_INDEX_FILE}")

    @router.get(prefix + "/{asset:path}")
    async def swagger(asset: str, request: Request) -> Response:
        if asset in ("", SWAGGER_INDEX_FILE):
            return get_swagger_ui_html(openapi_url=doc_url, title=docs_config.title)

        if asset == SWAGGER_DOC_FILE:
            host = request.headers.get("host") or request.url.netloc
            return ORJSONResponse(
                build_openapi_document(
                    app,
                    host=host,
                    scheme=request.url.scheme,
                    base_path=docs_config.base_path,
                )
            )

        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Documentation asset '{asset}' not found",
        )

    return router
