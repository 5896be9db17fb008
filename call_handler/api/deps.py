"""FastAPI dependencies for the external services used by the pipeline."""

from functools import lru_cache

from call_handler.domain.services.intent_classifier import IntentClassifier
from call_handler.infrastructure.transcription.base import TranscriptionGateway
from call_handler.infrastructure.transcription.factory import get_transcription_gateway
from call_handler.llm.factory import get_llm_client


@lru_cache
def get_transcriber() -> TranscriptionGateway:
    """Get the configured transcription gateway."""
    return get_transcription_gateway()


@lru_cache
def get_intent_classifier() -> IntentClassifier:
    """Get the transcript intent classifier."""
    return IntentClassifier(get_llm_client())
