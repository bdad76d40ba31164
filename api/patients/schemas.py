"""
Patient schemas.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class PatientIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date


class InsertResult(BaseModel):
    affected_rows: int


# Fixed sample batch written by POST /insert.
SAMPLE_PATIENTS: tuple[PatientIn, ...] = (
    PatientIn(name="Sara Brown", date_of_birth=date(1901, 1, 1)),
    PatientIn(name="John Smith", date_of_birth=date(1941, 1, 1)),
    PatientIn(name="Jack Ma", date_of_birth=date(1961, 1, 30)),
    PatientIn(name="Elon Musk", date_of_birth=date(1999, 1, 1)),
)
