"""Transcription provider infrastructure."""

from call_handler.infrastructure.transcription.base import (
    TranscriptionError,
    TranscriptionGateway,
    TranscriptResult,
)
from call_handler.infrastructure.transcription.factory import get_transcription_gateway

__all__ = [
    "TranscriptionError",
    "TranscriptionGateway",
    "TranscriptResult",
    "get_transcription_gateway",
]
