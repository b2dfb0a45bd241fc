"""LLM client for section drafting with OpenAI integration.

Security: Reads API key from settings/environment only, never hardcoded.
Provides a deterministic stub when no key is present for testing.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from docwriter.app.config import Settings

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    """Protocol for chat-completion client implementations."""

    async def complete(self, *, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """Generate text for a system + user prompt pair.

        Args:
            system_prompt: Instructions for the model
            user_prompt: User message
            temperature: Sampling temperature

        Returns:
            Generated text (may be empty)

        Raises:
            Exception: Transport or authentication errors from the provider
        """
        ...


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    async def complete(self, *, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """Echo the user prompt as a placeholder draft."""
        return (
            f"Draft based on: {user_prompt}\n\n"
            "This is a stub response generated without a language model."
        )


class OpenAIGenerationClient:
    """OpenAI-backed client for real drafting."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", base_url: str | None = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use
            base_url: Optional OpenAI-compatible endpoint
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model

    async def complete(self, *, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """Generate text using the chat completions API."""
        logger.info(f"Generating text with model: {self.model}")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def get_generation_client(settings: Settings) -> GenerationClient:
    """Factory function to get appropriate generation client based on config.

    Returns:
        OpenAIGenerationClient if API key is configured, DeterministicStubClient otherwise
    """
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using OpenAI client for generation (model={settings.openai_model})")
        return OpenAIGenerationClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            base_url=settings.openai_base_url,
        )

    logger.warning("No OpenAI API key configured, using deterministic stub client")
    return DeterministicStubClient()
