"""Transcript intent classification with a language model."""

import logging
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from call_handler.core.request_context import log_stage, safe_preview
from call_handler.domain.prompts.classification_prompts import (
    PLUMBER_CLASSIFICATION_PROMPT,
    VOICEMAIL_CLASSIFICATION_PROMPT,
)
from call_handler.llm.client import LLMClient, LLMError
from call_handler.settings import settings

logger = logging.getLogger(__name__)


class ClassificationError(Exception):
    """Raised when a transcript could not be classified into a valid label."""


class PromptKind(str, Enum):
    """Which closed-vocabulary classification to run."""

    PLUMBER = "plumber"
    VOICEMAIL = "voicemail"


class ClassificationLabel(str, Enum):
    """Labels a classification can produce."""

    GENUINE = "genuine"
    NOT_GENUINE = "not_genuine"
    VOICEMAIL = "voicemail"
    NOT_VOICEMAIL = "not_voicemail"


class PlumberIntentOutput(BaseModel):
    """Expected model output for the plumber-intent prompt."""

    model_config = ConfigDict(extra="forbid")

    intent: Literal["genuine", "not_genuine"]

    @property
    def label(self) -> ClassificationLabel:
        return ClassificationLabel(self.intent)


class VoicemailOutput(BaseModel):
    """Expected model output for the voicemail prompt."""

    model_config = ConfigDict(extra="forbid")

    voicemail: Literal["voicemail", "not_voicemail"]

    @property
    def label(self) -> ClassificationLabel:
        return ClassificationLabel(self.voicemail)


def _response_schema(field_name: str, values: list[str]) -> dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {field_name: {"type": "STRING", "enum": values}},
        "required": [field_name],
    }


PROMPTS: dict[PromptKind, tuple[str, type[BaseModel], dict[str, Any]]] = {
    PromptKind.PLUMBER: (
        PLUMBER_CLASSIFICATION_PROMPT,
        PlumberIntentOutput,
        _response_schema("intent", ["genuine", "not_genuine"]),
    ),
    PromptKind.VOICEMAIL: (
        VOICEMAIL_CLASSIFICATION_PROMPT,
        VoicemailOutput,
        _response_schema("voicemail", ["voicemail", "not_voicemail"]),
    ),
}


class IntentClassifier:
    """Classifies call transcripts with a constrained-output LLM request."""

    def __init__(self, llm_client: LLMClient, max_output_tokens: int | None = None) -> None:
        """Initialize classifier with an LLM client."""
        self.llm_client = llm_client
        self.max_output_tokens = max_output_tokens or settings.classifier_max_output_tokens

    async def classify(self, text: str, kind: PromptKind) -> ClassificationLabel:
        """Classify a transcript with the prompt selected by ``kind``.

        The request runs at temperature 0 with a small token ceiling since the
        answer is a single categorical value.

        Args:
            text: Transcript text
            kind: Prompt to run

        Returns:
            Exactly one label valid for the prompt kind

        Raises:
            ClassificationError: If the transcript is empty, the LLM call fails,
                or the output is not one of the documented values
        """
        if not text or not text.strip():
            raise ClassificationError("cannot classify an empty transcript")

        prompt, output_model, response_schema = PROMPTS[kind]

        with log_stage(
            logger,
            f"classify:{kind.value}",
            input_chars=len(text),
            prompt_preview=safe_preview(prompt, 120),
        ) as result:
            try:
                output_text = await self.llm_client.generate_json(
                    text,
                    system_instruction=prompt,
                    response_schema=response_schema,
                    context={"temperature": 0.0, "max_tokens": self.max_output_tokens},
                )
            except LLMError as e:
                raise ClassificationError(str(e)) from e

            try:
                parsed = output_model.model_validate_json((output_text or "").strip())
            except ValidationError as e:
                raise ClassificationError(
                    f"unexpected {kind.value} classifier output: {safe_preview(output_text, 140)!r}"
                ) from e

            result["label"] = parsed.label.value
            return parsed.label
