"""Google Gemini embedding provider adapter.

Wraps ``genai.embed_content_async`` with ``models/embedding-001``
(768 dimensions).  The SDK embeds one input per call here, so ``embed``
issues one request per text; ingestion already fans chunk requests out
concurrently.
"""

from __future__ import annotations

import google.generativeai as genai
import structlog
from google.api_core import exceptions as google_exceptions

from lexassist.config.settings import Settings
from lexassist.interfaces.embedding_provider import IEmbeddingProvider
from lexassist.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

_GEMINI_DIMENSION = 768


class GeminiEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by the Gemini embedding model."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.gemini_api_key
        self._model = settings.gemini_embedding_model
        if self._api_key:
            genai.configure(api_key=self._api_key)

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_single(text) for text in texts]

    async def embed_single(self, text: str) -> list[float]:
        try:
            result = await genai.embed_content_async(model=self._model, content=text)
        except google_exceptions.GoogleAPIError as exc:
            raise EmbeddingError(
                message=f"Gemini embedding API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        values = result.get("embedding") if result else None
        if not values:
            raise EmbeddingError(
                message="Gemini returned no embedding",
                provider_name=self.get_provider_name(),
            )
        return list(values)

    def get_dimension(self) -> int:
        return _GEMINI_DIMENSION

    def get_provider_name(self) -> str:
        return "gemini_embedding"

    def is_available(self) -> bool:
        return bool(self._api_key)
