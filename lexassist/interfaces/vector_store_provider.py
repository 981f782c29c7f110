"""Abstract base class for vector database providers.

The vector store only deals in ids, vectors and metadata.  Embedding the
query happens before the store is called, so a store never needs an
embedding provider of its own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lexassist.models.document import CorpusStats, RetrievalMatch, VectorRecord


# Concrete implementations: ChromaDBProvider, InMemoryVectorStore
# Located in: lexassist/providers/vector_store/
class IVectorStoreProvider(ABC):
    """Contract for id-keyed vector storage with similarity search."""

    @abstractmethod
    async def upsert(self, records: list[VectorRecord]) -> int:
        """Insert or overwrite *records* by id in a single call.

        Parameters
        ----------
        records:
            Records to write.  An existing record with the same id is
            replaced, so repeated ingestion of a chunk is idempotent.

        Returns
        -------
        int
            Number of records written.

        Raises
        ------
        lexassist.utils.errors.RetrievalError
            If the store rejects the write.
        """

    @abstractmethod
    async def query(
        self,
        vector: list[float],
        top_k: int = 5,
        include_metadata: bool = True,
    ) -> list[RetrievalMatch]:
        """Return up to *top_k* nearest records, most similar first.

        An empty store returns an empty list; that is not an error.

        Raises
        ------
        lexassist.utils.errors.RetrievalError
            If the similarity query fails.
        """

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored records."""

    @abstractmethod
    async def get_stats(self) -> CorpusStats:
        """Return aggregate statistics about the corpus."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store is reachable."""
