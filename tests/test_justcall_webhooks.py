"""Tests for the JustCall webhook and call log endpoints."""

import copy
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from conftest import classified_kinds, make_classifier, make_transcriber

from call_handler.api.deps import get_intent_classifier, get_transcriber
from call_handler.domain.services.intent_classifier import ClassificationLabel, PromptKind
from call_handler.infrastructure.transcription.base import TranscriptionError
from call_handler.main import app
from call_handler.persistence.database import get_db
from call_handler.persistence.models.partner import Partner
from call_handler.persistence.repositories.call_log_repository import PersistenceError

WEBHOOK_URL = "/api/v1/justcall/call-completed"


@pytest.fixture
def transcriber():
    return make_transcriber("Customer: please call me back")


@pytest.fixture
def classifier():
    return make_classifier(plumber=ClassificationLabel.GENUINE)


@pytest.fixture
async def client(db_session, transcriber, classifier):
    """HTTP client bound to the app with external services replaced."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_transcriber] = lambda: transcriber
    app.dependency_overrides[get_intent_classifier] = lambda: classifier

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def partner(db_session):
    partner = Partner(name="Bondi Plumbing", phone="+61298765432")
    db_session.add(partner)
    await db_session.commit()
    await db_session.refresh(partner)
    return partner


class TestCallCompletedWebhook:
    """Tests for POST /justcall/call-completed."""

    async def test_invalid_json(self, client):
        response = await client.post(
            WEBHOOK_URL, content=b"{not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}

    async def test_non_object_json(self, client):
        response = await client.post(WEBHOOK_URL, json=["call.completed"])

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}

    async def test_other_event_types_are_ignored(self, client, transcriber):
        response = await client.post(WEBHOOK_URL, json={"type": "call.ringing", "data": {}})

        assert response.status_code == 202
        assert response.json() == {"ok": True, "ignored": True, "eventType": "call.ringing"}
        transcriber.transcribe.assert_not_awaited()

    async def test_missing_customer_number_makes_no_external_calls(
        self, client, transcriber, classifier, sample_call_completed_payload
    ):
        payload = copy.deepcopy(sample_call_completed_payload)
        del payload["data"]["contact_number"]

        response = await client.post(WEBHOOK_URL, json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing customer_number"}
        transcriber.transcribe.assert_not_awaited()
        classifier.classify.assert_not_awaited()

    async def test_unsupported_direction(self, client, sample_call_completed_payload):
        payload = copy.deepcopy(sample_call_completed_payload)
        payload["data"]["call_info"]["direction"] = "internal"

        response = await client.post(WEBHOOK_URL, json=payload)

        assert response.status_code == 400
        assert "Unsupported call_direction" in response.json()["error"]

    async def test_inbound_voicemail_is_classified_and_stored(
        self, client, partner, classifier, sample_call_completed_payload
    ):
        response = await client.post(WEBHOOK_URL, json=sample_call_completed_payload)

        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "callSid": "CA-justcall-0001",
            "finalStatus": "voicemail",
            "missedBy": "partner",
            "chargeable": True,
        }
        assert classified_kinds(classifier) == [PromptKind.PLUMBER]

        stored = await client.get("/api/v1/calls/CA-justcall-0001")
        assert stored.status_code == 200
        body = stored.json()
        assert body["partner_id"] == partner.id
        assert body["customer_number"] == "+0412345678"
        assert body["voicemail"] is True
        assert body["voicemail_transcription"] == "Customer: please call me back"
        assert body["transcription"] is None
        assert body["duration"] == 42
        assert body["provider_status"] == "voicemail"

    async def test_redelivery_upserts_single_row(self, client, partner, sample_call_completed_payload):
        first = await client.post(WEBHOOK_URL, json=sample_call_completed_payload)
        second = await client.post(WEBHOOK_URL, json=sample_call_completed_payload)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()

        listed = await client.get("/api/v1/calls")
        assert [c["call_sid"] for c in listed.json()] == ["CA-justcall-0001"]

    @pytest.mark.parametrize("call_type", ["Voicemail", "Answered"])
    async def test_transcription_failure_still_persists_outcome(
        self, client, partner, classifier, sample_call_completed_payload, call_type
    ):
        app.dependency_overrides[get_transcriber] = lambda: make_transcriber(
            error=TranscriptionError("Deepgram failed: 502")
        )
        payload = copy.deepcopy(sample_call_completed_payload)
        payload["data"]["call_info"]["type"] = call_type

        response = await client.post(WEBHOOK_URL, json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["chargeable"] is False
        assert body["finalStatus"] == call_type.lower()
        classifier.classify.assert_not_awaited()

        stored = (await client.get("/api/v1/calls/CA-justcall-0001")).json()
        assert stored["chargeable"] is False
        assert stored["transcription"] is None
        assert stored["voicemail_transcription"] is None
        assert stored["partner_id"] == partner.id

    async def test_persistence_failure_returns_500(self, client, sample_call_completed_payload):
        with patch(
            "call_handler.domain.services.call_processing_service.CallLogRepository.upsert",
            new=AsyncMock(side_effect=PersistenceError("connection refused")),
        ):
            response = await client.post(WEBHOOK_URL, json=sample_call_completed_payload)

        assert response.status_code == 500
        assert response.json() == {"error": "DB insert failed"}

    async def test_request_id_header_is_echoed(self, client):
        response = await client.post(
            WEBHOOK_URL, json={"type": "call.ringing"}, headers={"X-Request-ID": "abc-123"}
        )

        assert response.headers["X-Request-ID"] == "abc-123"


class TestCallLogEndpoints:
    """Tests for the call log read endpoints."""

    async def test_unknown_call_sid_is_404(self, client):
        response = await client.get("/api/v1/calls/CA-missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Call not found"

    async def test_list_filters_by_status(self, client, sample_call_completed_payload):
        missed = copy.deepcopy(sample_call_completed_payload)
        missed["data"]["call_sid"] = "CA-justcall-0002"
        missed["data"]["call_info"]["type"] = "missed"
        await client.post(WEBHOOK_URL, json=sample_call_completed_payload)
        await client.post(WEBHOOK_URL, json=missed)

        response = await client.get("/api/v1/calls", params={"call_status": "missed"})

        assert response.status_code == 200
        assert [c["call_sid"] for c in response.json()] == ["CA-justcall-0002"]

    async def test_list_rejects_out_of_range_limit(self, client):
        response = await client.get("/api/v1/calls", params={"limit": 0})

        assert response.status_code == 422

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
