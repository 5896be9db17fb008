"""JustCall webhook endpoints."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from call_handler.api.deps import get_intent_classifier, get_transcriber
from call_handler.core.request_context import set_request_context
from call_handler.domain.services.call_event_parser import (
    ClientInputError,
    get_event_type,
    is_call_completed,
    parse_call_event,
)
from call_handler.domain.services.call_processing_service import CallProcessingService
from call_handler.domain.services.intent_classifier import IntentClassifier
from call_handler.infrastructure.transcription.base import TranscriptionGateway
from call_handler.persistence.database import get_db
from call_handler.persistence.repositories.call_log_repository import PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/call-completed")
async def call_completed_webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    transcriber: Annotated[TranscriptionGateway, Depends(get_transcriber)],
    classifier: Annotated[IntentClassifier, Depends(get_intent_classifier)],
) -> JSONResponse:
    """Handle the JustCall call.completed webhook.

    Derives the call outcome (transcribing and classifying the recording when
    needed) and upserts it into call_logs keyed by call SID.

    Returns:
        200 with the outcome summary, 202 for ignored event types, 400 for
        malformed payloads or missing fields, 500 when persistence fails
    """
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("webhook:invalid_json", extra={"body_bytes": len(raw_body)})
        return JSONResponse({"error": "Invalid JSON"}, status_code=status.HTTP_400_BAD_REQUEST)
    if not isinstance(payload, dict):
        logger.warning("webhook:invalid_json", extra={"body_type": type(payload).__name__})
        return JSONResponse({"error": "Invalid JSON"}, status_code=status.HTTP_400_BAD_REQUEST)

    if payload.get("request_id"):
        set_request_context(request_id=str(payload["request_id"]))

    event_type = get_event_type(payload)
    if not is_call_completed(payload):
        logger.info("webhook:ignored", extra={"event_type": event_type})
        return JSONResponse(
            {"ok": True, "ignored": True, "eventType": event_type},
            status_code=status.HTTP_202_ACCEPTED,
        )

    try:
        event = parse_call_event(payload)
    except ClientInputError as e:
        logger.warning("webhook:rejected", extra={"event_type": event_type, "reason": str(e)})
        return JSONResponse({"error": str(e)}, status_code=status.HTTP_400_BAD_REQUEST)

    set_request_context(call_sid=event.call_id)
    logger.info(
        "webhook:received",
        extra={
            "event_type": event_type,
            "direction": event.direction.value,
            "status": event.raw_status,
            "has_recording": event.has_recording,
            "duration_seconds": event.duration_seconds,
            "partner_number": event.partner_number,
            "customer_number": event.customer_number,
        },
    )

    service = CallProcessingService(db, transcriber, classifier)
    try:
        outcome = await service.process(event)
    except PersistenceError:
        logger.error("webhook:persistence_failed", exc_info=True)
        return JSONResponse({"error": "DB insert failed"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        {
            "ok": True,
            "callSid": outcome.call_id,
            "finalStatus": outcome.final_status.value,
            "missedBy": outcome.missed_by.value if outcome.missed_by else None,
            "chargeable": outcome.chargeable,
        },
        status_code=status.HTTP_200_OK,
    )
