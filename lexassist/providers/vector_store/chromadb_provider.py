"""ChromaDB vector store provider adapter.

Wraps ``chromadb.PersistentClient`` to implement :class:`IVectorStoreProvider`.
Uses cosine distance for similarity search.  Fully local, no external
service required.
"""

from __future__ import annotations

import json
import os
from typing import Any

# ChromaDB reads this before its telemetry client is created.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog

from lexassist.interfaces.vector_store_provider import IVectorStoreProvider
from lexassist.models.document import CorpusStats, RetrievalMatch, VectorRecord
from lexassist.utils.errors import RetrievalError

logger = structlog.get_logger(logger_name=__name__)

_Scalar = str | int | float | bool


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Embedding function that refuses to run.

    Every record arrives with its embedding already computed, so Chroma's
    default ONNX model is never needed; passing this stops Chroma from
    downloading and loading it when the collection is opened.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "lexassist uses pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB with local persistence.

    Parameters
    ----------
    persist_directory:
        Directory for Chroma's on-disk data.
    collection_name:
        Collection holding the corpus.
    expected_dimension:
        Dimension of the configured embedding model.  When given, the
        first stored vector is checked against it at startup so a model
        switch fails loudly instead of returning meaningless matches.
    """

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "lexassist_documents",
        expected_dimension: int | None = None,
    ) -> None:
        self._persist_directory = persist_directory
        self._collection_name = collection_name
        self._client = chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        # Collections created by older Chroma versions persist their own
        # embedding function and reject a different one with ValueError.
        try:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )

        if expected_dimension is not None:
            self._validate_embedding_dimensions(expected_dimension)

    # ------------------------------------------------------------------
    # Startup validation
    # ------------------------------------------------------------------

    def _validate_embedding_dimensions(self, expected_dim: int) -> None:
        """Compare one stored vector's length with *expected_dim*."""
        try:
            collection_count = self._collection.count()
            if collection_count == 0:
                return

            sample = self._collection.peek(limit=1)
            embeddings = sample.get("embeddings") if sample else None
            if embeddings is None or len(embeddings) == 0:
                return

            stored_dim = len(embeddings[0])
            if stored_dim != expected_dim:
                logger.error(
                    "embedding_dimension_mismatch",
                    stored_dim=stored_dim,
                    expected_dim=expected_dim,
                    collection=self._collection_name,
                )
                raise RetrievalError(
                    message=(
                        f"Embedding dimension mismatch: collection '{self._collection_name}' "
                        f"holds {stored_dim}-dim vectors but the embedding provider "
                        f"produces {expected_dim}-dim vectors."
                    ),
                    provider_name=self.get_provider_name(),
                )

            logger.info(
                "embedding_dimension_validated",
                dimension=stored_dim,
                corpus_chunks=collection_count,
            )
        except RetrievalError:
            raise
        except Exception as exc:
            logger.warning("embedding_dimension_check_skipped", error=str(exc))

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def upsert(self, records: list[VectorRecord]) -> int:
        """Write all *records* in one ``collection.upsert`` call."""
        if not records:
            return 0

        try:
            self._collection.upsert(
                ids=[r.id for r in records],
                embeddings=[r.values for r in records],
                documents=[str(r.metadata.get("text", "")) for r in records],
                metadatas=[self._sanitize_metadata(r.metadata) for r in records],
            )
        except Exception as exc:
            raise RetrievalError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_upsert", count=len(records), collection=self._collection_name)
        return len(records)

    async def query(
        self,
        vector: list[float],
        top_k: int = 5,
        include_metadata: bool = True,
    ) -> list[RetrievalMatch]:
        try:
            available = self._collection.count()
            if available == 0 or top_k <= 0:
                return []

            include = ["documents", "distances"]
            if include_metadata:
                include.append("metadatas")

            results = self._collection.query(
                query_embeddings=[vector],
                n_results=min(top_k, available),
                include=include,
            )
        except Exception as exc:
            raise RetrievalError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        ids = results["ids"][0] if results.get("ids") else []
        documents = results["documents"][0] if results.get("documents") else [""] * len(ids)
        distances = results["distances"][0] if results.get("distances") else [0.0] * len(ids)
        metadatas = (
            results["metadatas"][0] if include_metadata and results.get("metadatas") else None
        )

        matches: list[RetrievalMatch] = []
        for i, record_id in enumerate(ids):
            metadata: dict[str, Any] = {}
            if metadatas is not None:
                metadata = dict(metadatas[i] or {})
                metadata.setdefault("text", documents[i] or "")
            matches.append(
                RetrievalMatch(
                    id=record_id,
                    score=max(0.0, min(1.0, 1.0 - distances[i])),
                    metadata=metadata,
                )
            )

        logger.info(
            "chromadb_query",
            results_count=len(matches),
            top_score=matches[0].score if matches else 0.0,
        )
        return matches

    async def count(self) -> int:
        try:
            return self._collection.count()
        except Exception as exc:
            raise RetrievalError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def get_stats(self) -> CorpusStats:
        return CorpusStats(
            total_chunks=await self.count(),
            provider=self.get_provider_name(),
            collection=self._collection_name,
        )

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        try:
            self._collection.count()
            return True
        except Exception:
            return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _sanitize_metadata(metadata: dict[str, Any]) -> dict[str, _Scalar]:
        """Coerce metadata into the scalar values Chroma accepts.

        ``None`` values are dropped; lists and dicts are stored as JSON
        strings.
        """
        clean: dict[str, _Scalar] = {}
        for key, value in metadata.items():
            if value is None:
                continue
            if isinstance(value, (str, int, float, bool)):
                clean[str(key)] = value
            else:
                clean[str(key)] = json.dumps(value, default=str)
        return clean
