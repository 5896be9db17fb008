"""Deepgram transcription provider.

Downloads the call recording from its (presigned) URL and sends the audio to
Deepgram's pre-recorded listen API with multichannel diarization.

API docs: https://developers.deepgram.com/reference/listen-file
"""

import logging
import posixpath
from typing import Any
from urllib.parse import urlsplit

import httpx

from call_handler.core.request_context import log_stage, safe_preview
from call_handler.infrastructure.transcription.base import (
    TranscriptionError,
    TranscriptionGateway,
    TranscriptResult,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

EXTENSION_CONTENT_TYPES: dict[str, str] = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "m4a": "audio/mp4",
}

# Channel 0 carries the inbound audio leg
CUSTOMER_CHANNEL = 0


def resolve_content_type(header_value: str | None, recording_url: str) -> str:
    """Pick the audio content type from the response header or URL extension.

    Args:
        header_value: Content-Type header of the recording response
        recording_url: Recording URL, used for extension fallback

    Returns:
        Media type without parameters
    """
    content_type = (header_value or "").split(";")[0].strip().lower()
    if content_type and content_type != DEFAULT_CONTENT_TYPE:
        return content_type

    path = urlsplit(recording_url).path
    extension = posixpath.splitext(path)[1].lstrip(".").lower()
    return EXTENSION_CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def speaker_label(channel: int | None) -> str:
    return "Customer" if channel == CUSTOMER_CHANNEL else "Agent"


def _start_time(utterance: dict[str, Any]) -> float:
    start = utterance.get("start")
    return float(start) if isinstance(start, (int, float)) else 0.0


def build_transcript_lines(results: dict[str, Any]) -> tuple[str, ...]:
    """Turn Deepgram results into speaker-labelled transcript lines.

    Utterances are used when present (chronological, one line per turn).
    Otherwise each channel's best alternative becomes one line, in channel
    order. Entries that are not shaped like Deepgram objects are skipped.
    """
    utterances = results.get("utterances")
    if not isinstance(utterances, list):
        utterances = []
    lines = []
    for u in sorted((u for u in utterances if isinstance(u, dict)), key=_start_time):
        transcript = u.get("transcript")
        if isinstance(transcript, str) and transcript.strip():
            lines.append(f"{speaker_label(u.get('channel'))}: {transcript.strip()}")
    if lines:
        return tuple(lines)

    channels = results.get("channels")
    if not isinstance(channels, list):
        return ()

    fallback = []
    for index, channel in enumerate(channels):
        if not isinstance(channel, dict):
            continue
        alternatives = channel.get("alternatives")
        if not isinstance(alternatives, list) or not alternatives or not isinstance(alternatives[0], dict):
            continue
        transcript = alternatives[0].get("transcript")
        if isinstance(transcript, str) and transcript.strip():
            fallback.append(f"Speaker {index + 1}: {transcript.strip()}")
    return tuple(fallback)


class DeepgramTranscriber(TranscriptionGateway):
    """Transcribe call recordings with Deepgram."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.deepgram.com",
        model: str = "nova-3",
        fetch_timeout: float = 30.0,
        transcription_timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Deepgram transcriber.

        Args:
            api_key: Deepgram API key
            base_url: Deepgram API base URL
            model: Deepgram model name
            fetch_timeout: Timeout for downloading the recording (seconds)
            transcription_timeout: Timeout for the Deepgram request (seconds)
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.fetch_timeout = fetch_timeout
        self.transcription_timeout = transcription_timeout
        self._transport = transport

    async def transcribe(self, recording_reference: str) -> TranscriptResult:
        if not recording_reference or not isinstance(recording_reference, str):
            raise TranscriptionError("recording reference must be a non-empty string")
        if not self.api_key:
            raise TranscriptionError("Deepgram API key is not configured")

        audio, content_type = await self._fetch_recording(recording_reference)
        payload = await self._request_transcription(audio, content_type)

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, dict) or not results.get("channels"):
            raise TranscriptionError("Invalid Deepgram response format: no results.channels")

        try:
            lines = build_transcript_lines(results)
        except (AttributeError, TypeError, KeyError, IndexError, ValueError) as e:
            raise TranscriptionError(f"Invalid Deepgram response format: {e}") from e
        if not lines:
            raise TranscriptionError("Deepgram returned an empty transcript")

        return TranscriptResult(lines=lines, provider="deepgram", raw=payload)

    async def _fetch_recording(self, recording_url: str) -> tuple[bytes, str]:
        with log_stage(logger, "recording:fetch", url_preview=safe_preview(recording_url, 80)) as result:
            try:
                async with httpx.AsyncClient(
                    timeout=self.fetch_timeout,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    resp = await client.get(recording_url)
                    resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise TranscriptionError(
                    f"Fetch recording failed: {e.response.status_code} {safe_preview(e.response.text, 140)}"
                ) from e
            except httpx.HTTPError as e:
                raise TranscriptionError(f"Fetch recording failed: {e}") from e

            content_type = resolve_content_type(resp.headers.get("content-type"), recording_url)
            result["content_type"] = content_type
            result["bytes"] = len(resp.content)
            return resp.content, content_type

    async def _request_transcription(self, audio: bytes, content_type: str) -> Any:
        params = {
            "model": self.model,
            "multichannel": "true",
            "smart_format": "true",
            "utterances": "true",
        }
        with log_stage(logger, "deepgram", content_type=content_type, bytes=len(audio)) as result:
            try:
                async with httpx.AsyncClient(
                    timeout=self.transcription_timeout,
                    transport=self._transport,
                ) as client:
                    resp = await client.post(
                        f"{self.base_url}/v1/listen",
                        params=params,
                        headers={
                            "Authorization": f"Token {self.api_key}",
                            "Content-Type": content_type,
                        },
                        content=audio,
                    )
                    resp.raise_for_status()
                    payload = resp.json()
            except httpx.HTTPStatusError as e:
                raise TranscriptionError(
                    f"Deepgram failed: {e.response.status_code} {safe_preview(e.response.text, 180)}"
                ) from e
            except httpx.HTTPError as e:
                raise TranscriptionError(f"Deepgram request failed: {e}") from e
            except ValueError as e:
                raise TranscriptionError("Deepgram returned a non-JSON body") from e

            result["status_code"] = resp.status_code
            return payload
