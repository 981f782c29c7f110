"""Embedding provider adapters.

Concrete implementations of IEmbeddingProvider:
    - GeminiEmbeddingProvider  -- models/embedding-001 (768 dims)
    - OpenAIEmbeddingProvider  -- text-embedding-3-small (1536 dims)
    - NomicEmbeddingProvider   -- nomic-embed-text via Ollama (768 dims)
"""

from lexassist.providers.embedding.gemini_embedding_provider import GeminiEmbeddingProvider
from lexassist.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from lexassist.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = [
    "GeminiEmbeddingProvider",
    "NomicEmbeddingProvider",
    "OpenAIEmbeddingProvider",
]
