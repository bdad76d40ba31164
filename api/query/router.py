"""
Ad-hoc query API endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from core.db import Connection, DatabaseConnectionError, QueryError
from core.logging import get_logger
from core.messages import message

from . import service

logger = get_logger(__name__)

router = APIRouter()

SQL_SEGMENT = "/sql/"


def get_read_db(request: Request) -> Connection:
    return request.app.state.read_db


def _raw_path(request: Request) -> str:
    """
    The request path exactly as sent, before the server percent-decodes it.
    """
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    return raw.split(b"?", 1)[0].decode("latin-1")


def encoded_sql_from_path(raw_path: str, api_base: str) -> str | None:
    """
    The still-encoded SQL after `{api_base}/sql/`.

    None when the prefix is not literally present, e.g. `sql%2F...`; such a
    path only matched the route after the server decoded it.
    """
    prefix = api_base + SQL_SEGMENT
    if not raw_path.startswith(prefix):
        return None
    return raw_path[len(prefix):]


@router.get("/sql/{sql:path}")
async def run_sql(
    request: Request,
    db: Connection = Depends(get_read_db),
) -> Response:
    """
    Execute the URL-encoded SQL in the path and return the rows as JSON.
    """
    encoded = encoded_sql_from_path(_raw_path(request), request.app.state.settings.api_base)
    if encoded is None:
        logger.info("No route for encoded path %s", _raw_path(request))
        return PlainTextResponse(message("route_not_found"), status_code=404)

    try:
        sql = service.decode_sql(encoded)
    except service.DecodingError as exc:
        logger.warning("Rejected undecodable query path: %s", exc)
        return PlainTextResponse(str(exc), status_code=400)

    try:
        rows = await service.run_sql(db, sql)
    except (QueryError, DatabaseConnectionError) as exc:
        logger.error("Query failed: %s", exc)
        return PlainTextResponse(message("query_error") + str(exc), status_code=500)

    return Response(content=service.to_json(rows), media_type="application/json")
