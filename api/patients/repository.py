"""
Patient persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any, Iterable

from core.db import Connection

from .schemas import PatientIn

CREATE_PATIENT_TABLE = """
CREATE TABLE IF NOT EXISTS patient (
    patientid SERIAL PRIMARY KEY,
    name VARCHAR(100),
    dateOfBirth DATE
)
"""


def _values_clause(count: int) -> str:
    # ($1, $2), ($3, $4), ...
    return ", ".join(f"(${2 * i + 1}, ${2 * i + 2})" for i in range(count))


async def create_table_if_missing(conn: Connection) -> None:
    await conn.query(CREATE_PATIENT_TABLE)


async def insert_patients(conn: Connection, patients: Iterable[PatientIn]) -> list[dict[str, Any]]:
    """
    Insert all `patients` in one statement.

    Returns the new rows' ids.
    """
    patients = list(patients)
    if not patients:
        raise RuntimeError("insert_patients called with an empty batch.")

    args: list[Any] = []
    for patient in patients:
        args.extend((patient.name, patient.date_of_birth))

    return await conn.query(
        f"""
        INSERT INTO patient (name, dateOfBirth)
        VALUES {_values_clause(len(patients))}
        RETURNING patientid
        """,
        *args,
    )
