"""
Search backend errors and their HTTP mapping.
Repository raises these; main registers `search_backend_error_handler` so routes stay thin.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SearchBackendError(Exception):
    """Elasticsearch could not serve a request (connection, timeout, API error)."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ProductWriteError(SearchBackendError):
    """Index, bulk index or delete was rejected. Carries the product ids that were not written."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, failed_ids: list[str] | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.failed_ids = failed_ids or []


async def search_backend_error_handler(request: Request, exc: SearchBackendError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    content: dict = {"detail": exc.message}
    if isinstance(exc, ProductWriteError) and exc.failed_ids:
        content["failed_ids"] = exc.failed_ids
    return JSONResponse(status_code=exc.status_code, content=content)
