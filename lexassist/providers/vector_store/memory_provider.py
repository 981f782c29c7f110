"""In-process vector store backed by numpy.

Used by tests and for trying the assistant without a ChromaDB directory.
Records live in a dict keyed by id; a query stacks every vector into a
matrix and ranks by cosine similarity.  Nothing is persisted.
"""

from __future__ import annotations

import numpy as np
import structlog

from lexassist.interfaces.vector_store_provider import IVectorStoreProvider
from lexassist.models.document import CorpusStats, RetrievalMatch, VectorRecord
from lexassist.utils.errors import RetrievalError

logger = structlog.get_logger(logger_name=__name__)


class InMemoryVectorStore(IVectorStoreProvider):
    """Dict-backed vector store with exact cosine search."""

    def __init__(self, collection_name: str = "memory") -> None:
        self._collection_name = collection_name
        self._records: dict[str, VectorRecord] = {}

    async def upsert(self, records: list[VectorRecord]) -> int:
        dims = {len(r.values) for r in records}
        if self._records:
            dims.add(len(next(iter(self._records.values())).values))
        if len(dims) > 1:
            raise RetrievalError(
                message=f"Mixed embedding dimensions in upsert: {sorted(dims)}",
                provider_name=self.get_provider_name(),
            )
        for record in records:
            self._records[record.id] = record
        return len(records)

    async def query(
        self,
        vector: list[float],
        top_k: int = 5,
        include_metadata: bool = True,
    ) -> list[RetrievalMatch]:
        if not self._records or top_k <= 0:
            return []

        records = list(self._records.values())
        matrix = np.asarray([r.values for r in records], dtype=np.float64)
        query = np.asarray(vector, dtype=np.float64)
        if matrix.shape[1] != query.shape[0]:
            raise RetrievalError(
                message=(
                    f"Query vector has {query.shape[0]} dims, "
                    f"stored vectors have {matrix.shape[1]}"
                ),
                provider_name=self.get_provider_name(),
            )

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        # Zero vectors score 0 instead of dividing by zero.
        scores = np.divide(matrix @ query, norms, out=np.zeros(len(records)), where=norms > 0)
        order = np.argsort(-scores, kind="stable")[:top_k]

        return [
            RetrievalMatch(
                id=records[i].id,
                score=float(scores[i]),
                metadata=dict(records[i].metadata) if include_metadata else {},
            )
            for i in order
        ]

    async def count(self) -> int:
        return len(self._records)

    async def get_stats(self) -> CorpusStats:
        return CorpusStats(
            total_chunks=len(self._records),
            provider=self.get_provider_name(),
            collection=self._collection_name,
        )

    def get_provider_name(self) -> str:
        return "memory"

    def is_available(self) -> bool:
        return True
