"""LLM client interface."""

from abc import ABC, abstractmethod
from typing import Any


class LLMError(Exception):
    """Raised when the LLM provider call fails."""


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate_json(
        self,
        prompt: str,
        system_instruction: str | None = None,
        response_schema: Any = None,
        context: dict | None = None,
    ) -> str:
        """Generate a structured (JSON) response from the LLM.

        Args:
            prompt: User content sent to the model
            system_instruction: Optional system prompt
            response_schema: Schema the output is constrained to (pydantic model class)
            context: Optional generation parameters (temperature, max_tokens)

        Returns:
            The raw JSON text produced by the model

        Raises:
            LLMError: If the provider call fails
        """
        pass
