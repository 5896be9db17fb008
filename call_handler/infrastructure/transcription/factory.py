"""Transcription gateway factory."""

import logging

from call_handler.infrastructure.transcription.base import TranscriptionGateway
from call_handler.infrastructure.transcription.deepgram_provider import DeepgramTranscriber
from call_handler.settings import settings

logger = logging.getLogger(__name__)


def get_transcription_gateway(provider: str | None = None) -> TranscriptionGateway:
    """Return the transcription gateway for the configured provider.

    Args:
        provider: Provider name, defaults to settings.transcription_provider

    Returns:
        TranscriptionGateway instance

    Raises:
        ValueError: If the provider is not supported
    """
    selected = (provider or settings.transcription_provider).lower()

    if selected == "deepgram":
        if not settings.deepgram_api_key:
            logger.warning("DEEPGRAM_API_KEY is not set; recordings will not be transcribed")
        return DeepgramTranscriber(
            api_key=settings.deepgram_api_key,
            base_url=settings.deepgram_base_url,
            model=settings.deepgram_model,
            fetch_timeout=settings.recording_fetch_timeout_seconds,
            transcription_timeout=settings.transcription_timeout_seconds,
        )

    raise ValueError(f"Unsupported transcription provider: {selected}")
