"""Google Gemini completion provider adapter.

Wraps ``google.generativeai``.  ``genai.configure`` sets the API key for
the whole process, so the key is applied once when the adapter is built;
every Gemini adapter in one process must share the same key.
"""

from __future__ import annotations

import google.generativeai as genai
import structlog
from google.api_core import exceptions as google_exceptions

from lexassist.config.settings import Settings
from lexassist.interfaces.llm_provider import ILLMProvider
from lexassist.utils.errors import CompletionError

logger = structlog.get_logger(logger_name=__name__)


class GeminiLLMProvider(ILLMProvider):
    """Completion provider backed by Gemini ``generate_content``.

    Defaults to ``gemini-2.0-flash``.  A response blocked by the safety
    filters has no ``.text``; the SDK raises ``ValueError`` for that, which
    is reported as a :class:`CompletionError` like any other failure.
    """

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.gemini_api_key
        self._model_name = settings.gemini_text_model
        if self._api_key:
            genai.configure(api_key=self._api_key)
        self._model = genai.GenerativeModel(self._model_name)

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        try:
            response = await self._model.generate_content_async(
                prompt,
                generation_config=genai.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            )
            text = response.text
        except google_exceptions.GoogleAPIError as exc:
            raise CompletionError(
                message=f"Gemini API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise CompletionError(
                message=f"Gemini returned no usable text: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not text:
            raise CompletionError(
                message="Gemini returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info("gemini_completion", model=self._model_name, chars=len(text))
        return text

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def validate_credentials(self) -> bool:
        if not self.is_available():
            return False
        try:
            await self._model.generate_content_async(
                "hi",
                generation_config=genai.GenerationConfig(max_output_tokens=5),
            )
            return True
        except google_exceptions.GoogleAPIError:
            return False

    def get_provider_name(self) -> str:
        return "gemini"
