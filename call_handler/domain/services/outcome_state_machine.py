"""Outcome derivation for completed calls.

Maps (direction, status category, recording presence) onto a normalized
CallOutcome, transcribing and classifying the recording where the decision
table asks for it. Transcription and classification failures never abort
the derivation: the affected fields keep their safe defaults.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace

from call_handler.core.request_context import log_stage, safe_preview
from call_handler.domain.models.call_outcome import (
    CallDirection,
    CallEvent,
    CallOutcome,
    FinalStatus,
    MissedBy,
    StatusCategory,
)
from call_handler.domain.services.intent_classifier import (
    ClassificationError,
    ClassificationLabel,
    IntentClassifier,
    PromptKind,
)
from call_handler.infrastructure.transcription.base import (
    TranscriptionError,
    TranscriptionGateway,
    TranscriptResult,
)

logger = logging.getLogger(__name__)

Handler = Callable[["OutcomeStateMachine", CallEvent, CallOutcome], Awaitable[CallOutcome]]


def decision_key(event: CallEvent) -> tuple[CallDirection, StatusCategory, bool]:
    """Collapse an event onto a row of the decision table.

    Inbound calls with an unrecognised status are treated as answered.
    Outbound calls are either answered or missed.
    """
    category = event.status_category
    if event.direction == CallDirection.INBOUND:
        if category == StatusCategory.OTHER:
            category = StatusCategory.ANSWERED
    elif category != StatusCategory.ANSWERED:
        category = StatusCategory.MISSED
    return event.direction, category, event.has_recording


class OutcomeStateMachine:
    """Derives a CallOutcome from a CallEvent."""

    def __init__(self, transcriber: TranscriptionGateway, classifier: IntentClassifier) -> None:
        self.transcriber = transcriber
        self.classifier = classifier

    async def derive(self, event: CallEvent) -> CallOutcome:
        """Run the decision table row matching the event.

        Args:
            event: Validated call event

        Returns:
            Fully populated CallOutcome (partner_id is resolved later)
        """
        key = decision_key(event)
        handler = DECISION_TABLE[key]
        logger.info(
            "outcome:route",
            extra={
                "direction": event.direction.value,
                "status": event.raw_status,
                "status_category": key[1].value,
                "has_recording": event.has_recording,
                "handler": handler.__name__,
            },
        )
        return await handler(self, event, CallOutcome.from_event(event))

    # Decision table rows

    async def inbound_voicemail_with_recording(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        outcome = replace(
            outcome,
            final_status=FinalStatus.VOICEMAIL,
            voicemail=True,
            missed_by=MissedBy.PARTNER,
        )
        transcript = await self._transcribe(event.recording_reference)
        if transcript is None:
            return outcome

        outcome = replace(outcome, voicemail_transcript_text=transcript.text)
        label = await self._classify(transcript.text, PromptKind.PLUMBER)
        return replace(outcome, chargeable=label == ClassificationLabel.GENUINE)

    async def inbound_voicemail(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        return replace(
            outcome,
            final_status=FinalStatus.VOICEMAIL,
            voicemail=True,
            missed_by=MissedBy.PARTNER,
        )

    async def inbound_missed(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        return replace(outcome, final_status=FinalStatus.MISSED, missed_by=MissedBy.PARTNER)

    async def inbound_answered_with_recording(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        transcript = await self._transcribe(event.recording_reference)
        if transcript is None:
            return outcome

        outcome = replace(outcome, transcript_text=transcript.text)
        label = await self._classify(transcript.text, PromptKind.PLUMBER)
        return replace(outcome, chargeable=label == ClassificationLabel.GENUINE)

    async def answered_without_recording(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        return replace(outcome, final_status=FinalStatus.ANSWERED, chargeable=False)

    async def outbound_missed(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        return replace(outcome, final_status=FinalStatus.MISSED, missed_by=MissedBy.CUSTOMER)

    async def outbound_answered_with_recording(self, event: CallEvent, outcome: CallOutcome) -> CallOutcome:
        transcript = await self._transcribe(event.recording_reference)
        if transcript is None:
            return outcome

        outcome = replace(outcome, transcript_text=transcript.text)
        voicemail_label = await self._classify(transcript.text, PromptKind.VOICEMAIL)
        if voicemail_label is None:
            # A pickup we could not rule human is never charged
            return outcome
        if voicemail_label == ClassificationLabel.VOICEMAIL:
            return replace(outcome, final_status=FinalStatus.MISSED, missed_by=MissedBy.CUSTOMER)

        label = await self._classify(transcript.text, PromptKind.PLUMBER)
        return replace(outcome, chargeable=label == ClassificationLabel.GENUINE)

    # Service calls

    async def _transcribe(self, recording_reference: str | None) -> TranscriptResult | None:
        """Transcribe a recording, returning None when transcription is unavailable."""
        try:
            with log_stage(logger, "transcribe", url_preview=safe_preview(recording_reference, 80)) as result:
                transcript = await self.transcriber.transcribe(recording_reference or "")
                result["transcript_chars"] = len(transcript.text)
                result["transcript_preview"] = safe_preview(transcript.text, 120)
                return transcript
        except TranscriptionError as e:
            logger.warning(
                "Transcription unavailable, continuing without transcript",
                extra={"failed_stage": "transcribe", "error_message": str(e)},
            )
            return None

    async def _classify(self, text: str, kind: PromptKind) -> ClassificationLabel | None:
        """Classify a transcript, returning None when classification is unavailable."""
        try:
            return await self.classifier.classify(text, kind)
        except ClassificationError as e:
            logger.warning(
                "Classification unavailable, using safe default",
                extra={"failed_stage": f"classify:{kind.value}", "error_message": str(e)},
            )
            return None


DECISION_TABLE: dict[tuple[CallDirection, StatusCategory, bool], Handler] = {
    (CallDirection.INBOUND, StatusCategory.VOICEMAIL, True): OutcomeStateMachine.inbound_voicemail_with_recording,
    (CallDirection.INBOUND, StatusCategory.VOICEMAIL, False): OutcomeStateMachine.inbound_voicemail,
    (CallDirection.INBOUND, StatusCategory.MISSED, True): OutcomeStateMachine.inbound_missed,
    (CallDirection.INBOUND, StatusCategory.MISSED, False): OutcomeStateMachine.inbound_missed,
    (CallDirection.INBOUND, StatusCategory.ANSWERED, True): OutcomeStateMachine.inbound_answered_with_recording,
    (CallDirection.INBOUND, StatusCategory.ANSWERED, False): OutcomeStateMachine.answered_without_recording,
    (CallDirection.OUTBOUND, StatusCategory.MISSED, True): OutcomeStateMachine.outbound_missed,
    (CallDirection.OUTBOUND, StatusCategory.MISSED, False): OutcomeStateMachine.outbound_missed,
    (CallDirection.OUTBOUND, StatusCategory.ANSWERED, True): OutcomeStateMachine.outbound_answered_with_recording,
    (CallDirection.OUTBOUND, StatusCategory.ANSWERED, False): OutcomeStateMachine.answered_without_recording,
}
