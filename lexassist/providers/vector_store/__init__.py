"""Vector store provider adapters."""

from lexassist.providers.vector_store.chromadb_provider import ChromaDBProvider
from lexassist.providers.vector_store.memory_provider import InMemoryVectorStore

__all__ = ["ChromaDBProvider", "InMemoryVectorStore"]
