"""Gemini client implementation."""

import os
from typing import Any

from google import genai
from google.genai import types

from call_handler.llm.client import LLMClient, LLMError
from call_handler.settings import settings


class GeminiClient(LLMClient):
    """Gemini client using the google-genai SDK."""

    def __init__(self, api_key: str | None = None, model_name: str | None = None) -> None:
        """Initialize Gemini client."""
        api_key = api_key or os.environ.get("GEMINI_API_KEY", settings.gemini_api_key)
        base_url = os.environ.get("GEMINI_BASE_URL")

        # Without a key every request fails with LLMError instead of at startup
        self.client: genai.Client | None = None
        if api_key:
            http_options = types.HttpOptions(api_version="v1beta", base_url=base_url or None)
            self.client = genai.Client(api_key=api_key, http_options=http_options)
        self.model_name = model_name or settings.gemini_model

    async def generate_json(
        self,
        prompt: str,
        system_instruction: str | None = None,
        response_schema: Any = None,
        context: dict | None = None,
    ) -> str:
        """Generate a JSON response using Gemini structured output.

        Args:
            prompt: User content sent to the model
            system_instruction: Optional system prompt
            response_schema: Schema the output is constrained to
            context: Optional context dictionary (temperature, max_tokens)

        Returns:
            The generated JSON text

        Raises:
            LLMError: If generation fails
        """
        if self.client is None:
            raise LLMError("Gemini API key is not configured")

        try:
            generation_config: dict[str, Any] = {
                "temperature": 0.0,
                "max_output_tokens": settings.classifier_max_output_tokens,
                "response_mime_type": "application/json",
            }

            if system_instruction:
                generation_config["system_instruction"] = system_instruction
            if response_schema is not None:
                generation_config["response_schema"] = response_schema
            if context:
                if "temperature" in context:
                    generation_config["temperature"] = context["temperature"]
                if "max_tokens" in context:
                    generation_config["max_output_tokens"] = context["max_tokens"]

            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(**generation_config),
            )

            return response.text or ""
        except Exception as e:
            raise LLMError(f"Gemini generation failed: {str(e)}") from e
