"""System prompts for transcript classification."""

from call_handler.domain.prompts.classification_prompts import (
    PLUMBER_CLASSIFICATION_PROMPT,
    VOICEMAIL_CLASSIFICATION_PROMPT,
)

__all__ = ["PLUMBER_CLASSIFICATION_PROMPT", "VOICEMAIL_CLASSIFICATION_PROMPT"]
