"""Orchestrator for the document ingestion pipeline.

Pipeline stages: **(extract ->) chunk -> embed -> store**.

The :class:`IngestionService` coordinates its collaborators without any of
them knowing about each other:

    1. TextExtractor -- reads .pdf / .docx / .txt files (``ingest_file`` only)
    2. TextChunker -- splits the text into header and sentence chunks
    3. IEmbeddingProvider -- one embedding request per chunk, issued
       concurrently and joined before anything is written
    4. IVectorStoreProvider -- a single batch upsert of every record

Ingestion is all-or-nothing from the caller's point of view: if any
embedding fails, nothing is written; if the upsert fails, the error
propagates.  Failures are logged and re-raised, never retried here.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from lexassist.models.document import CorpusStats, Document, IngestionResult, VectorRecord
from lexassist.services.ingestion.chunker import TextChunker
from lexassist.services.ingestion.text_extractor import TextExtractor
from lexassist.utils.concurrency import bounded_gather
from lexassist.utils.errors import EmbeddingError, LexAssistError, RetrievalError

if TYPE_CHECKING:
    from lexassist.interfaces.embedding_provider import IEmbeddingProvider
    from lexassist.interfaces.vector_store_provider import IVectorStoreProvider
    from lexassist.models.document import DocumentChunk

logger = structlog.get_logger(logger_name=__name__)


class IngestionService:
    """Turns one document into stored, queryable vector records.

    Parameters
    ----------
    chunker:
        Splits document text into chunks.
    embedding_provider:
        Generates one embedding per chunk.
    vector_store:
        Receives the batch upsert.
    extractor:
        Reads files for :meth:`ingest_file`.  A default
        :class:`TextExtractor` is created when omitted.
    concurrency:
        Maximum number of embedding requests in flight.
    default_metadata:
        Merged under each document's own metadata, e.g.
        ``{"category": "IP Law"}``.
    """

    def __init__(
        self,
        chunker: TextChunker,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        extractor: TextExtractor | None = None,
        concurrency: int = 8,
        default_metadata: dict[str, Any] | None = None,
    ) -> None:
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._extractor = extractor or TextExtractor()
        self._concurrency = concurrency
        self._default_metadata = dict(default_metadata or {})

    @property
    def embedding_provider(self) -> IEmbeddingProvider:
        return self._embedding_provider

    @property
    def vector_store(self) -> IVectorStoreProvider:
        return self._vector_store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(self, document: Document) -> IngestionResult:
        """Chunk, embed and upsert one document.

        Returns
        -------
        IngestionResult
            Number of records written and elapsed time.

        Raises
        ------
        EmbeddingError
            If any chunk could not be embedded.  No records are written.
        RetrievalError
            If the batch upsert fails.
        """
        start = time.monotonic()
        metadata = {**self._default_metadata, **document.metadata}
        source = str(metadata.get("source", ""))

        chunks = self._chunker.chunk(document.text, metadata)
        if not chunks:
            logger.info("ingestion_skipped_empty", source=source)
            return IngestionResult(source=source, chunks_created=0, ingestion_time=0.0)

        try:
            records = await self._embed_chunks(chunks)
            stored = await self._store(records)
        except LexAssistError as exc:
            logger.error(
                "ingestion_failed",
                source=source,
                chunks=len(chunks),
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        result = IngestionResult(
            source=source,
            chunks_created=stored,
            ingestion_time=round(time.monotonic() - start, 2),
        )
        logger.info(
            "ingestion_complete",
            source=source,
            chunks=stored,
            time_s=result.ingestion_time,
        )
        return result

    async def ingest_text(self, text: str, metadata: dict[str, Any] | None = None) -> IngestionResult:
        """Convenience wrapper building the :class:`Document` for :meth:`ingest`."""
        return await self.ingest(Document(text=text, metadata=metadata or {}))

    async def ingest_file(
        self,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
    ) -> IngestionResult:
        """Extract text from a .pdf / .docx / .txt file and ingest it.

        The file name is recorded as ``source`` unless *metadata* sets one.
        """
        text = self._extractor.extract_text(file_path)
        meta = {"source": Path(file_path).name, **(metadata or {})}
        return await self.ingest(Document(text=text, metadata=meta))

    async def get_corpus_stats(self) -> CorpusStats:
        """Return the vector store's corpus statistics."""
        return await self._vector_store.get_stats()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _embed_chunks(self, chunks: list[DocumentChunk]) -> list[VectorRecord]:
        """Embed every chunk concurrently and pair each vector with its chunk.

        ``bounded_gather`` returns results in input order, so ``zip`` keeps
        each embedding attached to the chunk it was computed from no matter
        which request finished first.
        """
        try:
            vectors = await bounded_gather(
                [self._embedding_provider.embed_single(c.text) for c in chunks],
                limit=self._concurrency,
            )
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingError(
                message=f"Chunk embedding failed: {exc}",
                provider_name=self._embedding_provider.get_provider_name(),
            ) from exc

        return [VectorRecord.from_chunk(chunk, vector) for chunk, vector in zip(chunks, vectors)]

    async def _store(self, records: list[VectorRecord]) -> int:
        try:
            return await self._vector_store.upsert(records)
        except RetrievalError:
            raise
        except Exception as exc:
            raise RetrievalError(
                message=f"Vector upsert failed: {exc}",
                provider_name=self._vector_store.get_provider_name(),
            ) from exc
