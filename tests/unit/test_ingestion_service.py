"""Unit tests for IngestionService -- chunk, embed, upsert."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from lexassist.models.document import Document, VectorRecord
from lexassist.services.ingestion.chunker import TextChunker
from lexassist.services.ingestion.ingestion_service import IngestionService
from lexassist.utils.errors import EmbeddingError, RetrievalError, UnsupportedInputError

EMBEDDING_DIM = 8


def _service(embedder: MagicMock, store: MagicMock, **kwargs) -> IngestionService:
    return IngestionService(
        chunker=TextChunker(),
        embedding_provider=embedder,
        vector_store=store,
        **kwargs,
    )


class TestIngest:
    @pytest.mark.asyncio
    async def test_one_record_per_chunk(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
        sample_contract: str,
    ) -> None:
        service = _service(mock_embedding_provider, mock_vector_store)
        result = await service.ingest(Document(text=sample_contract, metadata={"source": "nda.txt"}))

        assert result.chunks_created == 7
        assert result.source == "nda.txt"
        assert mock_embedding_provider.embed_single.await_count == 7
        mock_vector_store.upsert.assert_awaited_once()

        records: list[VectorRecord] = mock_vector_store.upsert.await_args.args[0]
        assert len(records) == 7
        assert len({r.id for r in records}) == 7
        assert records[0].metadata["text"] == "1. Definitions"
        assert all(len(r.values) == EMBEDDING_DIM for r in records)

    @pytest.mark.asyncio
    async def test_vectors_stay_paired_with_their_chunks(self, mock_vector_store: MagicMock) -> None:
        embedder = MagicMock()
        embedder.embed_single = AsyncMock(side_effect=lambda text: [float(len(text))])
        embedder.get_provider_name.return_value = "len"

        service = _service(embedder, mock_vector_store)
        await service.ingest_text("Short one. A much longer second sentence.")

        records = mock_vector_store.upsert.await_args.args[0]
        for record in records:
            assert record.values == [float(len(record.metadata["text"]))]

    @pytest.mark.asyncio
    async def test_empty_text_stores_nothing(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        service = _service(mock_embedding_provider, mock_vector_store)
        result = await service.ingest_text("   \n ")
        assert result.chunks_created == 0
        mock_embedding_provider.embed_single.assert_not_awaited()
        mock_vector_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_metadata_merged_under_document_metadata(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        service = _service(
            mock_embedding_provider,
            mock_vector_store,
            default_metadata={"category": "IP Law", "jurisdiction": "UK"},
        )
        await service.ingest_text("One clause.", {"category": "Employment"})

        record = mock_vector_store.upsert.await_args.args[0][0]
        assert record.metadata == {
            "category": "Employment",
            "jurisdiction": "UK",
            "text": "One clause.",
        }

    @pytest.mark.asyncio
    async def test_chunk_text_wins_over_text_metadata(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        service = _service(mock_embedding_provider, mock_vector_store)
        await service.ingest_text("Real sentence.", {"text": "stale"})
        record = mock_vector_store.upsert.await_args.args[0][0]
        assert record.metadata["text"] == "Real sentence."


class TestIngestFailures:
    @pytest.mark.asyncio
    async def test_one_failed_embedding_writes_nothing(self, mock_vector_store: MagicMock) -> None:
        vector = [0.1] * EMBEDDING_DIM
        embedder = MagicMock()
        embedder.embed_single = AsyncMock(
            side_effect=[vector, EmbeddingError("rate limited", provider_name="openai"), vector]
        )
        embedder.get_provider_name.return_value = "openai"

        service = _service(embedder, mock_vector_store, concurrency=1)
        with pytest.raises(EmbeddingError, match="rate limited"):
            await service.ingest_text("First. Second. Third.")

        mock_vector_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_embedding_failure_wrapped(self, mock_vector_store: MagicMock) -> None:
        embedder = MagicMock()
        embedder.embed_single = AsyncMock(side_effect=TimeoutError("slow"))
        embedder.get_provider_name.return_value = "nomic"

        service = _service(embedder, mock_vector_store)
        with pytest.raises(EmbeddingError) as exc_info:
            await service.ingest_text("Only sentence.")
        assert exc_info.value.provider_name == "nomic"
        mock_vector_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upsert_failure_propagates_as_retrieval_error(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        mock_vector_store.upsert = AsyncMock(side_effect=RuntimeError("disk full"))
        service = _service(mock_embedding_provider, mock_vector_store)
        with pytest.raises(RetrievalError, match="disk full"):
            await service.ingest_text("Only sentence.")


class TestIngestFile:
    @pytest.mark.asyncio
    async def test_txt_file_source_defaults_to_file_name(
        self,
        tmp_path: Path,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
        sample_contract: str,
    ) -> None:
        path = tmp_path / "services.txt"
        path.write_text(sample_contract, encoding="utf-8")

        service = _service(mock_embedding_provider, mock_vector_store)
        result = await service.ingest_file(path, {"category": "IP Law"})

        assert result.source == "services.txt"
        assert result.chunks_created == 7
        record = mock_vector_store.upsert.await_args.args[0][0]
        assert record.metadata["category"] == "IP Law"

    @pytest.mark.asyncio
    async def test_unsupported_extension(
        self,
        tmp_path: Path,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        path = tmp_path / "data.csv"
        path.write_text("a,b", encoding="utf-8")
        service = _service(mock_embedding_provider, mock_vector_store)
        with pytest.raises(UnsupportedInputError):
            await service.ingest_file(path)

    @pytest.mark.asyncio
    async def test_corpus_stats_delegates_to_store(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        service = _service(mock_embedding_provider, mock_vector_store)
        stats = await service.get_corpus_stats()
        assert stats.total_chunks == 2
        assert service.vector_store is mock_vector_store
        assert service.embedding_provider is mock_embedding_provider
