"""Tests for the call processing service."""

from unittest.mock import AsyncMock

import pytest

from conftest import make_classifier, make_transcriber

from call_handler.domain.models.call_outcome import CallDirection, CallEvent, FinalStatus, MissedBy
from call_handler.domain.services.call_processing_service import CallProcessingService
from call_handler.domain.services.intent_classifier import ClassificationLabel
from call_handler.infrastructure.transcription.base import TranscriptionError
from call_handler.persistence.models.partner import Partner
from call_handler.persistence.repositories.call_log_repository import (
    CallLogRepository,
    PersistenceError,
)


def make_event(status: str = "voicemail", direction: CallDirection = CallDirection.INBOUND) -> CallEvent:
    return CallEvent(
        call_id="CA-svc-0001",
        direction=direction,
        raw_status=status,
        partner_number="+61298765432",
        customer_number="+61412345678",
        duration_seconds=42,
        recording_reference="https://recordings.justcall.io/rec/abc123.mp3",
    )


@pytest.fixture
async def partner(db_session):
    """A partner owning the test JustCall line."""
    partner = Partner(name="Bondi Plumbing", phone="+61298765432")
    db_session.add(partner)
    await db_session.commit()
    await db_session.refresh(partner)
    return partner


class TestCallProcessingService:
    """Tests for CallProcessingService.process."""

    async def test_persists_outcome_with_partner(self, db_session, partner):
        service = CallProcessingService(
            db_session,
            make_transcriber("Customer: please call me back"),
            make_classifier(plumber=ClassificationLabel.GENUINE),
        )

        outcome = await service.process(make_event())

        assert outcome.partner_id == partner.id
        assert outcome.final_status == FinalStatus.VOICEMAIL
        call_log = await CallLogRepository(db_session).get_by_call_sid("CA-svc-0001")
        assert call_log.partner_id == partner.id
        assert call_log.call_status == "voicemail"
        assert call_log.missed_by == "partner"
        assert call_log.voicemail is True
        assert call_log.chargeable is True
        assert call_log.voicemail_transcription == "Customer: please call me back"
        assert call_log.transcription is None
        assert call_log.call_direction == "inbound"
        assert call_log.duration == 42

    async def test_unknown_partner_is_stored_without_partner(self, db_session):
        service = CallProcessingService(db_session, make_transcriber(), make_classifier())

        outcome = await service.process(make_event(status="missed"))

        assert outcome.partner_id is None
        call_log = await CallLogRepository(db_session).get_by_call_sid("CA-svc-0001")
        assert call_log.partner_id is None
        assert call_log.call_status == "missed"

    async def test_transcription_failure_still_persists(self, db_session, partner):
        service = CallProcessingService(
            db_session, make_transcriber(error=TranscriptionError("Deepgram failed: 500")), make_classifier()
        )

        outcome = await service.process(make_event(status="answered"))

        assert outcome.final_status == FinalStatus.ANSWERED
        call_log = await CallLogRepository(db_session).get_by_call_sid("CA-svc-0001")
        assert call_log.chargeable is False
        assert call_log.transcription is None

    async def test_outbound_voicemail_pickup_is_missed_by_customer(self, db_session, partner):
        service = CallProcessingService(
            db_session,
            make_transcriber("Customer: you have reached the voicemail of"),
            make_classifier(voicemail=ClassificationLabel.VOICEMAIL),
        )

        outcome = await service.process(make_event(status="answered", direction=CallDirection.OUTBOUND))

        assert outcome.final_status == FinalStatus.MISSED
        assert outcome.missed_by == MissedBy.CUSTOMER
        call_log = await CallLogRepository(db_session).get_by_call_sid("CA-svc-0001")
        assert call_log.missed_by == "customer"
        assert call_log.voicemail is False

    async def test_persistence_error_propagates(self, db_session):
        service = CallProcessingService(db_session, make_transcriber(), make_classifier())
        service.call_log_repo.upsert = AsyncMock(side_effect=PersistenceError("down"))

        with pytest.raises(PersistenceError):
            await service.process(make_event(status="missed"))
