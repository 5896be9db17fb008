"""LLM client factory for transcript classification."""

import logging
import os

from call_handler.llm.client import LLMClient
from call_handler.llm.gemini_client import GeminiClient
from call_handler.settings import settings

logger = logging.getLogger(__name__)

GEMINI_MODES = ("gemini", "google", "googleai")


def get_llm_client(mode: str | None = None, model_name: str | None = None) -> LLMClient:
    """Return the LLM client used by the intent classifier.

    Priority: explicit ``mode`` -> ``LLM_MODE`` env var -> ``settings.llm_mode``.

    Args:
        mode: Provider name
        model_name: Model override, defaults to ``settings.gemini_model``

    Returns:
        LLMClient instance

    Raises:
        ValueError: If the provider is not supported
    """
    selected = (mode or os.environ.get("LLM_MODE") or settings.llm_mode).strip().lower()

    if selected in GEMINI_MODES:
        api_key = os.environ.get("GEMINI_API_KEY") or settings.gemini_api_key
        if not api_key:
            logger.warning("GEMINI_API_KEY is not set; transcripts will not be classified")
        return GeminiClient(api_key=api_key, model_name=model_name or settings.gemini_model)

    raise ValueError(
        f"Unsupported LLM mode: {selected!r} (supported: {', '.join(GEMINI_MODES)})"
    )
