"""Ollama completion provider adapter.

Ollama exposes an OpenAI-compatible ``/v1`` API, so this adapter reuses
``openai.AsyncOpenAI`` pointed at the local server.  Lets the assistant
run fully offline once ``ollama pull llama3.1`` has been done.
"""

from __future__ import annotations

import httpx
import openai
import structlog

from lexassist.config.settings import Settings
from lexassist.interfaces.llm_provider import ILLMProvider
from lexassist.utils.errors import CompletionError

logger = structlog.get_logger(logger_name=__name__)


class OllamaLLMProvider(ILLMProvider):
    """Completion provider backed by a local Ollama server."""

    def __init__(self, settings: Settings) -> None:
        self._base_url = settings.ollama_base_url
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url.rstrip('/')}/v1",
            # The SDK insists on a non-empty key; Ollama ignores it.
            api_key="ollama",
        )
        self._model = settings.ollama_text_model

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            raise CompletionError(
                message=f"Ollama API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content
        if not content:
            raise CompletionError(
                message="Ollama returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info("ollama_completion", model=self._model)
        return content

    def is_available(self) -> bool:
        return bool(self._base_url)

    async def validate_credentials(self) -> bool:
        """Check that the server answers on its native ``/api/tags`` endpoint."""
        if not self.is_available():
            return False
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(f"{self._base_url.rstrip('/')}/api/tags")
                return response.status_code == 200
        except httpx.HTTPError:
            return False

    def get_provider_name(self) -> str:
        return "ollama"
