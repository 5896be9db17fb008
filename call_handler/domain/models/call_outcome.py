"""Call event and call outcome value types."""

from dataclasses import dataclass
from enum import Enum


class CallDirection(str, Enum):
    """Direction of the call relative to the partner's JustCall line."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


class StatusCategory(str, Enum):
    """Closed category of the provider's free-text call status."""

    VOICEMAIL = "voicemail"
    MISSED = "missed"
    ANSWERED = "answered"
    OTHER = "other"


class FinalStatus(str, Enum):
    """Normalized call status that gets persisted."""

    ANSWERED = "answered"
    MISSED = "missed"
    VOICEMAIL = "voicemail"


class MissedBy(str, Enum):
    """Which party missed the call."""

    PARTNER = "partner"
    CUSTOMER = "customer"


# Provider status strings that mean nobody picked up on the partner side
MISSED_STATUSES = frozenset({"missed", "abandoned", "unanswered", "no-answer", "no_answer", "busy"})

DIRECTION_ALIASES: dict[str, CallDirection] = {
    "incoming": CallDirection.INBOUND,
    "inbound": CallDirection.INBOUND,
    "outgoing": CallDirection.OUTBOUND,
    "outbound": CallDirection.OUTBOUND,
}


def categorize_status(raw_status: str) -> StatusCategory:
    """Map a lowercase provider status onto a StatusCategory."""
    if raw_status == "voicemail":
        return StatusCategory.VOICEMAIL
    if raw_status in MISSED_STATUSES:
        return StatusCategory.MISSED
    if raw_status == "answered":
        return StatusCategory.ANSWERED
    return StatusCategory.OTHER


@dataclass(frozen=True)
class CallEvent:
    """Validated fields extracted from a JustCall call.completed webhook."""

    call_id: str
    direction: CallDirection
    raw_status: str
    partner_number: str
    customer_number: str
    duration_seconds: int = 0
    recording_reference: str | None = None

    @property
    def status_category(self) -> StatusCategory:
        return categorize_status(self.raw_status)

    @property
    def has_recording(self) -> bool:
        return bool(self.recording_reference)


@dataclass(frozen=True)
class CallOutcome:
    """Normalized outcome of one call, the unit of persistence."""

    call_id: str
    customer_number: str
    direction: CallDirection
    final_status: FinalStatus
    provider_status: str = ""
    duration_seconds: int = 0
    recording_reference: str | None = None
    partner_id: int | None = None
    transcript_text: str | None = None
    chargeable: bool = False
    voicemail: bool = False
    voicemail_transcript_text: str | None = None
    missed_by: MissedBy | None = None

    def __post_init__(self) -> None:
        if self.final_status == FinalStatus.VOICEMAIL:
            if not self.voicemail or self.missed_by != MissedBy.PARTNER:
                raise ValueError("voicemail outcome must set voicemail=True and missed_by=partner")
        if self.final_status == FinalStatus.MISSED and self.missed_by is None:
            raise ValueError("missed outcome must set missed_by")
        if self.transcript_text is not None and self.voicemail_transcript_text is not None:
            raise ValueError("only one of transcript_text / voicemail_transcript_text may be set")

    @classmethod
    def from_event(cls, event: CallEvent) -> "CallOutcome":
        """Baseline outcome for an event before any branch applies."""
        return cls(
            call_id=event.call_id,
            customer_number=event.customer_number,
            direction=event.direction,
            final_status=FinalStatus.ANSWERED,
            provider_status=event.raw_status,
            duration_seconds=event.duration_seconds,
            recording_reference=event.recording_reference,
        )

    def to_record(self) -> dict:
        """Column values for the call_logs table."""
        return {
            "call_sid": self.call_id,
            "partner_id": self.partner_id,
            "customer_number": self.customer_number,
            "call_direction": self.direction.value,
            "duration": self.duration_seconds,
            "recording_url": self.recording_reference,
            "transcription": self.transcript_text,
            "chargeable": self.chargeable,
            "call_status": self.final_status.value,
            "provider_status": self.provider_status,
            "voicemail": self.voicemail,
            "voicemail_transcription": self.voicemail_transcript_text,
            "missed_by": self.missed_by.value if self.missed_by else None,
        }
