"""
Patient API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from core.db import DatabaseConnectionError, QueryError
from core.logging import get_logger
from core.messages import message

from .service import PatientService

logger = get_logger(__name__)

router = APIRouter()


def get_patient_service(request: Request) -> PatientService:
    return request.app.state.patient_service


@router.post("/insert", response_class=PlainTextResponse)
async def insert_patients(
    service: PatientService = Depends(get_patient_service),
) -> PlainTextResponse:
    """
    Create the patient table if needed, then insert the sample batch.

    Not idempotent: every call appends another batch.
    """
    try:
        await service.ensure_schema()
        result = await service.insert_batch()
    except (QueryError, DatabaseConnectionError) as exc:
        logger.error("Insert failed: %s", exc)
        return PlainTextResponse(message("insert_error") + str(exc), status_code=500)

    return PlainTextResponse(message("insert_success", result.affected_rows))
