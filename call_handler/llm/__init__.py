"""LLM abstraction layer."""

from call_handler.llm.client import LLMClient, LLMError
from call_handler.llm.factory import get_llm_client
from call_handler.llm.gemini_client import GeminiClient

__all__ = ["LLMClient", "LLMError", "GeminiClient", "get_llm_client"]
