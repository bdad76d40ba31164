from __future__ import annotations

import asyncio
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.db import DatabaseConnectionError, QueryError
from main import create_app


class FakeConnection:
    """In-memory stand-in for core.db.Connection."""

    def __init__(self, name: str = "fake") -> None:
        self.name = name
        self.connected = False
        self.closed = False
        self.executed: list[tuple[str, tuple[Any, ...]]] = []
        self.patient_count = 0
        self.rows: list[dict[str, Any]] = []
        self.query_error: str | None = None
        self.connect_error: str | None = None
        self.connect_delay = 0.0
        self.session_lost = False
        self.events: list[str] = []

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise DatabaseConnectionError(self.connect_error)
        self.connected = True
        self.events.append("connect")

    async def close(self) -> None:
        self.events.append("close")
        self.closed = True
        self.connected = False

    async def query(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        if self.session_lost:
            raise DatabaseConnectionError(f"The {self.name} session is not connected.")
        self.executed.append((sql, args))
        if self.query_error is not None:
            raise QueryError(self.query_error)
        if "INSERT INTO patient" in sql:
            # Two bind parameters per row.
            new_ids = range(self.patient_count + 1, self.patient_count + len(args) // 2 + 1)
            self.patient_count += len(new_ids)
            return [{"patientid": i} for i in new_ids]
        if sql.lstrip().upper().startswith("CREATE"):
            return []
        return list(self.rows)


@pytest.fixture
def settings() -> Settings:
    return Settings(db_name="test", db_insert_user="writer", db_read_user="reader")


@pytest.fixture
def insert_db() -> FakeConnection:
    return FakeConnection("insert")


@pytest.fixture
def read_db() -> FakeConnection:
    return FakeConnection("read")


@pytest.fixture
def client(settings, insert_db, read_db):
    app = create_app(settings, insert_db=insert_db, read_db=read_db)
    with TestClient(app) as c:
        yield c
