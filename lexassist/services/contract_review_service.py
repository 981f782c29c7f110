"""Whole-contract review and batch questions over the stored corpus.

Both operations return free text rather than a JSON contract:

- :meth:`ContractReviewService.review_file` extracts a contract, ingests it
  so later questions can retrieve from it, and asks the model to review the
  full text for legal risks.
- :meth:`ContractReviewService.ask_corpus` answers a question from the
  three nearest chunks.  With nothing retrieved it returns a fixed message
  and does not call the model at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from lexassist.models.responses import ContractReview, CorpusAnswer
from lexassist.services.ingestion.text_extractor import collapse_whitespace
from lexassist.services.prompt_builder import (
    build_context,
    render_corpus_question_prompt,
    render_review_prompt,
)
from lexassist.utils.errors import UnsupportedInputError

if TYPE_CHECKING:
    from lexassist.interfaces.llm_provider import ILLMProvider
    from lexassist.services.ingestion.ingestion_service import IngestionService
    from lexassist.services.ingestion.text_extractor import TextExtractor
    from lexassist.services.prompt_builder import PromptBuilder

logger = structlog.get_logger(logger_name=__name__)

NO_RESULTS_MESSAGE = "No relevant results found."


class ContractReviewService:
    """Batch review operations over contracts and the corpus."""

    def __init__(
        self,
        extractor: TextExtractor,
        ingestion_service: IngestionService,
        prompt_builder: PromptBuilder,
        llm: ILLMProvider,
        top_k: int = 3,
        generation: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self._extractor = extractor
        self._ingestion = ingestion_service
        self._prompt_builder = prompt_builder
        self._llm = llm
        self._top_k = top_k
        self._generation = generation or {}

    async def review_file(
        self,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
    ) -> ContractReview:
        """Extract, ingest and review one contract file."""
        path = Path(file_path)
        text = self._extractor.extract_text(path)
        if not text.strip():
            raise UnsupportedInputError(message=f"No text could be extracted from {path.name}")

        ingested = await self._ingestion.ingest_text(
            text, {"source": path.name, **(metadata or {})}
        )

        prompt = render_review_prompt(collapse_whitespace(text))
        review = await self._llm.generate(prompt, **self._params("review"))

        logger.info(
            "contract_reviewed",
            file=path.name,
            chunks=ingested.chunks_created,
            review_chars=len(review),
        )
        return ContractReview(
            file_name=path.name,
            chunks_indexed=ingested.chunks_created,
            review=review.strip(),
        )

    async def ask_corpus(self, query: str) -> CorpusAnswer:
        """Answer *query* from the top-3 matching chunks."""
        if not query or not query.strip():
            raise UnsupportedInputError(message="Query is required.")

        matches = await self._prompt_builder.retrieve(query, top_k=self._top_k)
        if not matches:
            logger.info("corpus_question_no_matches", query_chars=len(query))
            return CorpusAnswer(query=query, answer=NO_RESULTS_MESSAGE, matches=[])

        prompt = render_corpus_question_prompt(build_context(matches), query)
        answer = await self._llm.generate(prompt, **self._params("corpus_question"))
        return CorpusAnswer(query=query, answer=answer.strip(), matches=matches)

    def _params(self, operation: str) -> dict[str, Any]:
        params = {"temperature": 0.3, "max_tokens": 4000}
        params.update(self._generation.get(operation, {}))
        return params
