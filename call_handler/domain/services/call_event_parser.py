"""Extraction and validation of JustCall webhook payloads."""

import logging
import math
from typing import Any

from call_handler.core.phone import normalize_phone
from call_handler.domain.models.call_outcome import DIRECTION_ALIASES, CallEvent

logger = logging.getLogger(__name__)

CALL_COMPLETED_EVENT = "call.completed"


class ClientInputError(Exception):
    """Raised when a webhook payload is missing a required field or is malformed."""


def get_event_type(payload: dict[str, Any]) -> str:
    """Return the lowercase webhook event type (``type`` or ``event``)."""
    return str(payload.get("type") or payload.get("event") or "").lower()


def is_call_completed(payload: dict[str, Any]) -> bool:
    return get_event_type(payload) == CALL_COMPLETED_EVENT


def as_duration(value: Any) -> int:
    """Coerce a provider duration to non-negative whole seconds (0 on garbage)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(round(number))


def parse_call_event(payload: dict[str, Any]) -> CallEvent:
    """Extract a validated CallEvent from a call.completed payload.

    Args:
        payload: Decoded webhook body

    Returns:
        CallEvent with normalized phone numbers, direction and status

    Raises:
        ClientInputError: If call id, partner number, customer number or
            direction is missing, or the direction is not recognised
    """
    data = payload.get("data")
    if not isinstance(data, dict):
        data = payload

    call_info = data.get("call_info") or {}
    if not isinstance(call_info, dict):
        call_info = {}
    call_duration = data.get("call_duration") or {}
    if not isinstance(call_duration, dict):
        call_duration = {}

    call_sid = data.get("call_sid")
    call_sid = str(call_sid).strip() if call_sid is not None else ""
    partner_number = normalize_phone(data.get("justcall_number"))
    customer_number = normalize_phone(data.get("contact_number"))
    raw_direction = str(call_info.get("direction") or "").strip().lower()
    raw_status = str(call_info.get("type") or "").strip().lower()
    recording = call_info.get("recording") or None

    if not call_sid:
        raise ClientInputError("Missing call_sid")
    if not partner_number:
        raise ClientInputError("Missing justcall line number")
    if not customer_number:
        raise ClientInputError("Missing customer_number")
    if not raw_direction:
        raise ClientInputError("Missing call_direction")

    direction = DIRECTION_ALIASES.get(raw_direction)
    if direction is None:
        logger.warning("Unsupported call direction", extra={"direction": raw_direction})
        raise ClientInputError("Unsupported call_direction")

    return CallEvent(
        call_id=call_sid,
        direction=direction,
        raw_status=raw_status,
        partner_number=partner_number,
        customer_number=customer_number,
        duration_seconds=as_duration(call_duration.get("total_duration")),
        recording_reference=str(recording) if recording else None,
    )
