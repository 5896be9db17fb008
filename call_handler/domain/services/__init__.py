"""Domain services."""

from call_handler.domain.services.call_processing_service import CallProcessingService
from call_handler.domain.services.intent_classifier import IntentClassifier
from call_handler.domain.services.outcome_state_machine import OutcomeStateMachine

__all__ = ["CallProcessingService", "IntentClassifier", "OutcomeStateMachine"]
