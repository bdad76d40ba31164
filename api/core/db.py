"""
Async database access (raw SQL) using asyncpg.

One `Connection` wraps exactly one asyncpg session. The app owns two of
them, one per database identity (insert / read), created in `main.py`
and opened in the lifespan hook.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
from typing import Any

import asyncpg

from core.logging import get_logger

logger = get_logger(__name__)


# DB failures are explicit and separable from other runtime errors.
class DatabaseConnectionError(RuntimeError):
    pass


class QueryError(RuntimeError):
    pass


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Connection:
    """
    A single long-lived asyncpg session bound to one set of credentials.
    """

    def __init__(
        self,
        *,
        host: str,
        user: str,
        password: str,
        database: str,
        port: int = 5432,
        name: str = "db",
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.name = name
        self._conn: asyncpg.Connection | None = None
        # asyncpg rejects overlapping operations on one session.
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._conn is not None and not self._conn.is_closed()

    async def connect(self) -> None:
        if self.is_connected:
            return None
        try:
            self._conn = await asyncpg.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise DatabaseConnectionError(str(exc)) from exc
        logger.info("Connected %s session as %s to %s:%s/%s", self.name, self.user, self.host, self.port, self.database)

    async def query(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run `sql` as given and return all rows as a list of dicts.

        Statements that produce no rows return an empty list.
        """
        if self._conn is None:
            raise DatabaseConnectionError(f"The {self.name} session is not connected.")

        async with self._lock:
            try:
                rows = await self._conn.fetch(sql, *args)
            except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
                raise QueryError(str(exc)) from exc
        return [_record_to_dict(r) for r in rows]

    async def close(self) -> None:
        if self._conn is None:
            return None
        try:
            await self._conn.close()
        finally:
            self._conn = None
