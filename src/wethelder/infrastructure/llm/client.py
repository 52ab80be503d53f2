"""LLM client infrastructure."""

import logging
from typing import Any, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Je bent een Nederlandse juridische assistent. Je baseert je antwoord "
    "uitsluitend op de aangeleverde bronnen en voegt geen eigen kennis toe."
)


class LLMClient:
    """Client for the answer-generation model (OpenAI-compatible)."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """Initialize LLM client.

        Args:
            api_key: API key for the LLM service.
            model: Model identifier.
            base_url: Base URL of the API. None uses the OpenAI default.
            client: Pre-built AsyncOpenAI client, mainly for tests.
        """
        self.model = model
        self._client = client or AsyncOpenAI(base_url=base_url, api_key=api_key)

    async def chat_completion(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        """Generate chat completion from LLM.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            **kwargs: Additional arguments to pass to the API.

        Returns:
            Response content string.

        Raises:
            Exception: If the API call fails.
        """
        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            **kwargs,
        )
        return completion.choices[0].message.content or ""

    async def answer(self, prompt: str, temperature: float = 0.1) -> str:
        """Send an assembled evidence prompt and return the model's answer."""
        logger.debug("Requesting answer from %s (%d prompt chars)", self.model, len(prompt))
        return await self.chat_completion(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
        )
