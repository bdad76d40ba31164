"""
HTTP plumbing shared by every route: CORS headers, OPTIONS short-circuit,
and plain-text error responses.
"""

from __future__ import annotations

from typing import Callable

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import get_logger
from core.messages import message

logger = get_logger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class PermissiveCorsMiddleware(BaseHTTPMiddleware):
    """
    Attach CORS headers to every response and answer OPTIONS for any path.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            response: Response = Response(status_code=200)
        else:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("Unhandled error: %s %s", request.method, request.url.path)
                response = PlainTextResponse(message("server_error") + str(exc), status_code=500)

        response.headers.update(CORS_HEADERS)
        return response


def register_error_handlers(app: FastAPI) -> None:
    """Route-level HTTP errors become plain-text responses."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        # Unknown path and known path with the wrong method both count as "no route".
        if exc.status_code in (404, 405):
            logger.info("No route for %s %s", request.method, request.url.path)
            return PlainTextResponse(message("route_not_found"), status_code=404)
        return PlainTextResponse(str(exc.detail or ""), status_code=exc.status_code)
