"""Tests for call log persistence."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from call_handler.persistence.database import utc_now
from call_handler.persistence.models.call_log import CallLog
from call_handler.persistence.repositories.call_log_repository import (
    CallLogRepository,
    PersistenceError,
)


def make_record(**overrides) -> dict:
    record = {
        "call_sid": "CA-repo-0001",
        "partner_id": None,
        "customer_number": "+61412345678",
        "call_direction": "inbound",
        "duration": 42,
        "recording_url": "https://recordings.justcall.io/rec/abc123.mp3",
        "transcription": None,
        "chargeable": False,
        "call_status": "voicemail",
        "provider_status": "voicemail",
        "voicemail": True,
        "voicemail_transcription": None,
        "missed_by": "partner",
    }
    record.update(overrides)
    return record


class TestCallLogRepository:
    """Tests for CallLogRepository."""

    async def test_upsert_inserts_new_row(self, db_session):
        repo = CallLogRepository(db_session)

        await repo.upsert(make_record(voicemail_transcription="Customer: please call me back"))

        call_log = await repo.get_by_call_sid("CA-repo-0001")
        assert call_log is not None
        assert call_log.call_status == "voicemail"
        assert call_log.missed_by == "partner"
        assert call_log.voicemail_transcription == "Customer: please call me back"
        assert call_log.created_at is not None

    async def test_upsert_same_sid_keeps_one_row_last_write_wins(self, db_session):
        repo = CallLogRepository(db_session)

        await repo.upsert(make_record())
        first = await repo.get_by_call_sid("CA-repo-0001")
        created_at = first.created_at

        await repo.upsert(make_record(chargeable=True, voicemail_transcription="Customer: leak in the kitchen"))

        count = await db_session.scalar(select(func.count()).select_from(CallLog))
        assert count == 1
        call_log = await repo.get_by_call_sid("CA-repo-0001")
        assert call_log.chargeable is True
        assert call_log.voicemail_transcription == "Customer: leak in the kitchen"
        assert call_log.created_at == created_at

    async def test_list_filters_by_status(self, db_session):
        repo = CallLogRepository(db_session)
        await repo.upsert(make_record())
        await repo.upsert(
            make_record(
                call_sid="CA-repo-0002",
                call_status="answered",
                provider_status="answered",
                voicemail=False,
                missed_by=None,
            )
        )

        answered = await repo.list(call_status="answered")

        assert [c.call_sid for c in answered] == ["CA-repo-0002"]
        assert len(await repo.list()) == 2

    async def test_get_by_call_sid_missing(self, db_session):
        assert await CallLogRepository(db_session).get_by_call_sid("nope") is None

    async def test_database_failure_raises_persistence_error(self, db_session):
        repo = CallLogRepository(db_session)
        db_session.execute = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))
        db_session.rollback = AsyncMock()

        with pytest.raises(PersistenceError):
            await repo.upsert(make_record())
        db_session.rollback.assert_awaited_once()

    async def test_redelivery_refreshes_updated_at(self, db_session):
        repo = CallLogRepository(db_session)

        await repo.upsert(make_record())
        first_updated = (await repo.get_by_call_sid("CA-repo-0001")).updated_at
        await repo.upsert(make_record(call_status="answered", voicemail=False, missed_by=None))

        call_log = await repo.get_by_call_sid("CA-repo-0001")
        assert call_log.updated_at >= first_updated
        assert call_log.updated_at >= call_log.created_at


def test_utc_now_is_timezone_aware():
    now = utc_now()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
