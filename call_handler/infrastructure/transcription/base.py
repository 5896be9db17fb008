"""Base transcription gateway interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class TranscriptionError(Exception):
    """Raised when a recording cannot be fetched or transcribed."""


@dataclass(frozen=True)
class TranscriptResult:
    """Speaker-attributed transcript of one call recording."""

    lines: tuple[str, ...]
    provider: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def text(self) -> str:
        """Transcript lines joined in chronological order."""
        return "\n".join(self.lines)


class TranscriptionGateway(ABC):
    """Protocol for speech-to-text provider implementations."""

    @abstractmethod
    async def transcribe(self, recording_reference: str) -> TranscriptResult:
        """Download a call recording and transcribe it.

        Turns are attributed to exactly two parties, "Customer" and "Agent",
        in chronological order.

        Args:
            recording_reference: URL of the call recording

        Returns:
            TranscriptResult with the transcript lines and raw provider response

        Raises:
            TranscriptionError: If the recording cannot be fetched or the
                provider returns a malformed or empty result
        """
        pass
