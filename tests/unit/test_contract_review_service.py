"""Unit tests for ContractReviewService -- file review and corpus questions."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from lexassist.services.contract_review_service import NO_RESULTS_MESSAGE, ContractReviewService
from lexassist.services.ingestion.chunker import TextChunker
from lexassist.services.ingestion.ingestion_service import IngestionService
from lexassist.services.ingestion.text_extractor import TextExtractor
from lexassist.services.prompt_builder import PromptBuilder
from lexassist.utils.errors import UnsupportedInputError


@pytest.fixture()
def service(
    mock_embedding_provider: MagicMock,
    mock_vector_store: MagicMock,
    mock_llm: MagicMock,
) -> ContractReviewService:
    extractor = TextExtractor()
    ingestion = IngestionService(
        TextChunker(), mock_embedding_provider, mock_vector_store, extractor=extractor
    )
    builder = PromptBuilder(mock_embedding_provider, mock_vector_store, top_k=5)
    return ContractReviewService(
        extractor,
        ingestion,
        builder,
        mock_llm,
        top_k=3,
        generation={"review": {"temperature": 0.2}},
    )


class TestReviewFile:
    @pytest.mark.asyncio
    async def test_ingests_then_reviews_full_text(
        self,
        tmp_path: Path,
        service: ContractReviewService,
        mock_llm: MagicMock,
        mock_vector_store: MagicMock,
        sample_contract: str,
    ) -> None:
        path = tmp_path / "services.txt"
        path.write_text(sample_contract, encoding="utf-8")
        mock_llm.generate = AsyncMock(return_value="  1. IP assignment is too broad.\n")

        review = await service.review_file(path)

        assert review.file_name == "services.txt"
        assert review.chunks_indexed == 7
        assert review.review == "1. IP assignment is too broad."
        mock_vector_store.upsert.assert_awaited_once()

        prompt = mock_llm.generate.await_args.args[0]
        assert prompt.startswith("Review this contract for legal risks")
        assert "1. Definitions Confidential Information" in prompt
        assert mock_llm.generate.await_args.kwargs == {"temperature": 0.2, "max_tokens": 4000}

    @pytest.mark.asyncio
    async def test_blank_file_rejected(
        self, tmp_path: Path, service: ContractReviewService, mock_llm: MagicMock
    ) -> None:
        path = tmp_path / "blank.txt"
        path.write_text("  \n", encoding="utf-8")
        with pytest.raises(UnsupportedInputError):
            await service.review_file(path)
        mock_llm.generate.assert_not_awaited()


class TestAskCorpus:
    @pytest.mark.asyncio
    async def test_uses_top_three(
        self,
        service: ContractReviewService,
        mock_llm: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        mock_llm.generate = AsyncMock(return_value="The Client owns the IP.")
        answer = await service.ask_corpus("Who owns the IP?")

        assert answer.answer == "The Client owns the IP."
        assert len(answer.matches) == 2
        assert mock_vector_store.query.await_args.kwargs["top_k"] == 3
        prompt = mock_llm.generate.await_args.args[0]
        assert "Question: Who owns the IP?" in prompt

    @pytest.mark.asyncio
    async def test_no_matches_skips_model(
        self,
        service: ContractReviewService,
        mock_llm: MagicMock,
        mock_vector_store: MagicMock,
    ) -> None:
        mock_vector_store.query = AsyncMock(return_value=[])
        answer = await service.ask_corpus("Anything?")

        assert answer.answer == NO_RESULTS_MESSAGE
        assert answer.matches == []
        mock_llm.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_query(self, service: ContractReviewService) -> None:
        with pytest.raises(UnsupportedInputError):
            await service.ask_corpus(" ")
