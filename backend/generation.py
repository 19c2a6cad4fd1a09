import logging
from typing import Optional, Protocol

import anthropic

from config import Settings
from errors import GenerationServiceError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class AnthropicGenerator:
    """Sends the prompt to Claude as a single user message and returns the text reply."""

    def __init__(self, settings: Settings, client: Optional[anthropic.AsyncAnthropic] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self.settings.has_api_key:
                raise GenerationServiceError("API key not configured")
            self._client = anthropic.AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.generation_timeout,
                max_retries=self.settings.generation_max_retries,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.settings.anthropic_model,
                max_tokens=self.settings.generation_max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.warning("Generation call failed: %s", e)
            raise GenerationServiceError("Generation service request failed", cause=e) from e

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        if not text.strip():
            raise GenerationServiceError("Generation service returned an empty response")
        return text
