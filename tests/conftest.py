"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from call_handler.domain.services.intent_classifier import ClassificationLabel, PromptKind
from call_handler.infrastructure.transcription.base import TranscriptResult
from call_handler.persistence.database import Base
from call_handler.persistence.models import *  # noqa: F401, F403


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


def make_transcriber(text: str = "Customer: please call me back", error: Exception | None = None) -> MagicMock:
    """Mock transcription gateway returning ``text`` (or raising ``error``)."""
    transcriber = MagicMock()
    if error is not None:
        transcriber.transcribe = AsyncMock(side_effect=error)
    else:
        transcriber.transcribe = AsyncMock(
            return_value=TranscriptResult(lines=tuple(text.split("\n")), provider="test")
        )
    return transcriber


def make_classifier(
    plumber: ClassificationLabel | Exception = ClassificationLabel.GENUINE,
    voicemail: ClassificationLabel | Exception = ClassificationLabel.NOT_VOICEMAIL,
) -> MagicMock:
    """Mock intent classifier answering per prompt kind."""
    answers = {PromptKind.PLUMBER: plumber, PromptKind.VOICEMAIL: voicemail}

    async def classify(text: str, kind: PromptKind) -> ClassificationLabel:
        answer = answers[kind]
        if isinstance(answer, Exception):
            raise answer
        return answer

    classifier = MagicMock()
    classifier.classify = AsyncMock(side_effect=classify)
    return classifier


def classified_kinds(classifier: MagicMock) -> list[PromptKind]:
    """Prompt kinds the mock classifier was awaited with, in order."""
    return [call.args[1] for call in classifier.classify.await_args_list]


@pytest.fixture
def sample_call_completed_payload():
    """Sample payload for the JustCall call.completed webhook."""
    return {
        "type": "call.completed",
        "request_id": "req-123",
        "data": {
            "call_sid": "CA-justcall-0001",
            "justcall_number": "+61 2 9876 5432",
            "contact_number": "0412 345 678",
            "call_info": {
                "direction": "Incoming",
                "type": "Voicemail",
                "recording": "https://recordings.justcall.io/rec/abc123.mp3?sig=xyz",
            },
            "call_duration": {"total_duration": "42"},
        },
    }
