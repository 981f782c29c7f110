"""Abstract base class for text-embedding service providers.

Defines the contract for turning text into a fixed-length vector.
Implementations wrap Google Gemini ``embedding-001``, OpenAI
``text-embedding-3-small`` (or any OpenAI-compatible endpoint), or
``nomic-embed-text`` served locally by Ollama.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   GeminiEmbeddingProvider  -- models/embedding-001 (768 dims)
#   OpenAIEmbeddingProvider  -- text-embedding-3-small (1536 dims)
#   NomicEmbeddingProvider   -- nomic-embed-text via Ollama (768 dims)
# Located in: lexassist/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for embedding services used by ingestion and retrieval.

    The same provider must be used for both sides: vectors written at
    ingestion time and query vectors must share one dimension and model.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.  Each
            inner list has length equal to :meth:`get_dimension`.

        Raises
        ------
        lexassist.utils.errors.EmbeddingError
            If the embedding service call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Used per chunk during ingestion and for the query at retrieval time.

        Raises
        ------
        lexassist.utils.errors.EmbeddingError
            If the embedding service call fails.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        This value must match the vectors already stored in the vector store.
        Example values: ``768`` (Gemini ``embedding-001``), ``1536`` (OpenAI
        ``text-embedding-3-small``).
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"gemini_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (and, for local servers, reachable)."""
