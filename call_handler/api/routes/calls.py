"""Call log read endpoints."""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from call_handler.persistence.database import get_db
from call_handler.persistence.repositories.call_log_repository import CallLogRepository

logger = logging.getLogger(__name__)

router = APIRouter()


class CallLogResponse(BaseModel):
    """Call log response model."""
    model_config = ConfigDict(from_attributes=True)

    call_sid: str
    partner_id: int | None = None
    customer_number: str
    call_direction: str
    duration: int
    recording_url: str | None = None
    transcription: str | None = None
    chargeable: bool
    call_status: str
    provider_status: str | None = None
    voicemail: bool
    voicemail_transcription: str | None = None
    missed_by: str | None = None
    created_at: datetime
    updated_at: datetime


@router.get("", response_model=list[CallLogResponse])
async def list_call_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    partner_id: int | None = None,
    call_status: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
) -> list[CallLogResponse]:
    """List call logs, newest first, optionally filtered by partner or status."""
    call_log_repo = CallLogRepository(db)
    call_logs = await call_log_repo.list(
        skip=skip,
        limit=limit,
        partner_id=partner_id,
        call_status=call_status,
    )
    return [CallLogResponse.model_validate(call_log) for call_log in call_logs]


@router.get("/{call_sid}", response_model=CallLogResponse)
async def get_call_log(
    call_sid: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CallLogResponse:
    """Get the persisted outcome of a call by its JustCall call SID."""
    call_log_repo = CallLogRepository(db)
    call_log = await call_log_repo.get_by_call_sid(call_sid)
    if call_log is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Call not found",
        )
    return CallLogResponse.model_validate(call_log)
