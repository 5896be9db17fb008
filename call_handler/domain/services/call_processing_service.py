"""Processing of completed JustCall calls into persisted call logs."""

import logging
from dataclasses import replace

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from call_handler.core.request_context import log_stage
from call_handler.domain.models.call_outcome import CallEvent, CallOutcome
from call_handler.domain.services.intent_classifier import IntentClassifier
from call_handler.domain.services.outcome_state_machine import OutcomeStateMachine
from call_handler.infrastructure.transcription.base import TranscriptionGateway
from call_handler.persistence.repositories.call_log_repository import CallLogRepository
from call_handler.persistence.repositories.partner_repository import PartnerRepository

logger = logging.getLogger(__name__)


class CallProcessingService:
    """Derives the outcome of a completed call and upserts it."""

    def __init__(
        self,
        session: AsyncSession,
        transcriber: TranscriptionGateway,
        classifier: IntentClassifier,
    ) -> None:
        """Initialize call processing service."""
        self.session = session
        self.state_machine = OutcomeStateMachine(transcriber, classifier)
        self.call_log_repo = CallLogRepository(session)
        self.partner_repo = PartnerRepository(session)

    async def process(self, event: CallEvent) -> CallOutcome:
        """Process one validated call event.

        Args:
            event: Validated call event

        Returns:
            The persisted CallOutcome

        Raises:
            PersistenceError: If the call log could not be upserted
        """
        outcome = await self.state_machine.derive(event)
        outcome = replace(outcome, partner_id=await self._resolve_partner_id(event.partner_number))

        record = outcome.to_record()
        with log_stage(
            logger,
            "db:call_logs:upsert",
            call_status=record["call_status"],
            missed_by=record["missed_by"],
            voicemail=record["voicemail"],
            partner_id=record["partner_id"],
            has_recording=bool(record["recording_url"]),
            transcription_chars=len(record["transcription"] or ""),
            voicemail_transcription_chars=len(record["voicemail_transcription"] or ""),
        ):
            await self.call_log_repo.upsert(record)

        logger.info(
            "run:summary",
            extra={
                "direction": outcome.direction.value,
                "final_status": outcome.final_status.value,
                "missed_by": outcome.missed_by.value if outcome.missed_by else None,
                "chargeable": outcome.chargeable,
                "had_transcription": outcome.transcript_text is not None,
                "had_voicemail_transcription": outcome.voicemail_transcript_text is not None,
            },
        )
        return outcome

    async def _resolve_partner_id(self, partner_number: str) -> int | None:
        """Look up the partner owning the JustCall line; a miss is tolerated."""
        try:
            with log_stage(logger, "db:partner:lookup", phone=partner_number) as result:
                partner = await self.partner_repo.get_by_phone(partner_number)
                result["partner_id"] = partner.id if partner else None
        except SQLAlchemyError:
            await self.session.rollback()
            return None

        if partner is None:
            logger.warning("No partner registered for JustCall line", extra={"phone": partner_number})
            return None
        return partner.id
