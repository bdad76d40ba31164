"""
Patient business logic.
"""

from __future__ import annotations

from core.db import Connection
from core.logging import get_logger

from . import repository
from .schemas import SAMPLE_PATIENTS, InsertResult

logger = get_logger(__name__)


class PatientService:
    """Schema setup and the sample insert, bound to the insert identity."""

    def __init__(self, db: Connection) -> None:
        self.db = db

    async def ensure_schema(self) -> None:
        await repository.create_table_if_missing(self.db)

    async def insert_batch(self) -> InsertResult:
        rows = await repository.insert_patients(self.db, SAMPLE_PATIENTS)
        logger.info("Inserted %d patient rows", len(rows))
        return InsertResult(affected_rows=len(rows))
