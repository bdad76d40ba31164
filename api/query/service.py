"""
Ad-hoc SQL over the read identity.

The SQL text arrives percent-encoded in the URL path and is executed as-is.
There is no statement allow-list; access is limited only by what the read
user is granted in the database.
"""

from __future__ import annotations

import base64
import json
import math
import re
from decimal import Decimal
from typing import Any
from urllib.parse import unquote_to_bytes

from fastapi.encoders import decimal_encoder, jsonable_encoder

from core.db import Connection
from core.logging import get_logger

logger = get_logger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class DecodingError(ValueError):
    pass


def decode_sql(encoded: str) -> str:
    """
    Strict percent-decoding.

    Unlike `urllib.parse.unquote`, malformed escapes and byte sequences
    that are not UTF-8 raise instead of being passed through or replaced.
    """
    bad = _BAD_ESCAPE.search(encoded)
    if bad is not None:
        raise DecodingError(f"URI malformed: invalid escape at position {bad.start()}")
    try:
        return unquote_to_bytes(encoded).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingError(f"URI malformed: {exc.reason}") from exc


async def run_sql(db: Connection, sql: str) -> list[dict[str, Any]]:
    logger.info("Running ad-hoc query: %s", sql[:200])
    rows = await db.query(sql)
    logger.info("Ad-hoc query returned %d rows", len(rows))
    return rows


def _encode_bytes(value: bytes) -> str:
    # bytea columns; raw bytes are not necessarily UTF-8.
    return base64.b64encode(value).decode("ascii")


def _encode_decimal(value: Decimal) -> int | float | None:
    if not value.is_finite():
        return None
    return decimal_encoder(value)


def _finite_or_none(value: Any) -> Any:
    # JSON has no NaN / Infinity; they become null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, list):
        return [_finite_or_none(v) for v in value]
    if isinstance(value, dict):
        return {k: _finite_or_none(v) for k, v in value.items()}
    return value


def to_json(rows: list[dict[str, Any]]) -> str:
    encoded = jsonable_encoder(
        rows,
        custom_encoder={
            bytes: _encode_bytes,
            bytearray: _encode_bytes,
            memoryview: lambda v: _encode_bytes(v.tobytes()),
            Decimal: _encode_decimal,
        },
    )
    return json.dumps(_finite_or_none(encoded), indent=2, ensure_ascii=False, allow_nan=False)
