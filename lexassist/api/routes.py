"""FastAPI routes for the lexassist API.

Service dependencies are resolved from ``app.state`` (populated at startup
by ``lexassist/main.py``) through ``Depends`` using the ``Annotated``
pattern, so tests can mount the router on a bare app and put mocks on
its state.

# ─── API ROUTE MAP ─────────────────────────────────────────────────────
#
# Endpoint                              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/documents                     POST    Ingest raw document text
# /api/v1/vulnerabilities               POST    Vulnerability report (JSON)
# /api/v1/email                         POST    Draft an email (JSON)
# /api/v1/notice                        POST    Formal notice from a report
# /api/v1/chat                          POST    Next chat turn for a session
# /api/v1/chat/{sid}/history            GET     Session chat history
# /api/v1/chat/{sid}/history            DELETE  Clear session chat history
# /api/v1/corpus/ask                    POST    Free-text corpus question (K=3)
# /api/v1/corpus/stats                  GET     Vector store statistics
# /api/v1/health                        GET     Health check + provider status
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request

from lexassist.api.schemas import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    CorpusAnswerResponse,
    CorpusStatsResponse,
    EmailResponse,
    ErrorResponse,
    HealthResponse,
    IngestRequest,
    IngestResponse,
    NoticeRequest,
    NoticeResponse,
    QueryRequest,
    VulnerabilityRequest,
    VulnerabilityResponse,
)
from lexassist.services.assistant_service import AssistantService
from lexassist.services.contract_review_service import ContractReviewService
from lexassist.services.ingestion.ingestion_service import IngestionService
from lexassist.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_assistant(request: Request) -> AssistantService:
    return request.app.state.assistant_service


def _get_ingestion(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def _get_review(request: Request) -> ContractReviewService:
    return request.app.state.review_service


AssistantDep = Annotated[AssistantService, Depends(_get_assistant)]
IngestionDep = Annotated[IngestionService, Depends(_get_ingestion)]
ReviewDep = Annotated[ContractReviewService, Depends(_get_review)]


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


@router.post(
    "/documents",
    response_model=IngestResponse,
    responses=_ERROR_RESPONSES,
    summary="Ingest document text into the vector store",
)
async def ingest_document(
    body: IngestRequest,
    ingestion: IngestionDep,
    request: Request,
) -> IngestResponse:
    """Chunk, embed and store the posted text.

    Ingestion is a separate step: the query endpoints below only read
    from the store.
    """
    metadata = dict(body.metadata)
    category = getattr(request.app.state, "default_category", None)
    if category:
        metadata.setdefault("category", category)

    result = await ingestion.ingest_text(body.text, metadata)
    return IngestResponse(
        source=result.source,
        chunks_created=result.chunks_created,
        ingestion_time=result.ingestion_time,
    )


# ---------------------------------------------------------------------------
# Assistant operations
# ---------------------------------------------------------------------------


@router.post(
    "/vulnerabilities",
    response_model=VulnerabilityResponse,
    responses=_ERROR_RESPONSES,
    summary="List legal vulnerabilities in the ingested documents",
)
async def analyze_vulnerabilities(
    body: VulnerabilityRequest,
    assistant: AssistantDep,
) -> VulnerabilityResponse:
    report = await assistant.analyze_vulnerabilities(body.query)
    return VulnerabilityResponse(response=report)


@router.post(
    "/email",
    response_model=EmailResponse,
    responses=_ERROR_RESPONSES,
    summary="Draft an email from the ingested documents",
)
async def draft_email(body: QueryRequest, assistant: AssistantDep) -> EmailResponse:
    draft = await assistant.draft_email(body.query)
    return EmailResponse(response=draft)


@router.post(
    "/notice",
    response_model=NoticeResponse,
    responses=_ERROR_RESPONSES,
    summary="Draft a formal notice from a vulnerability report",
)
async def draft_notice(body: NoticeRequest, assistant: AssistantDep) -> NoticeResponse:
    notice = await assistant.draft_notice(body.report, body.recipient)
    return NoticeResponse(response=notice)


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses=_ERROR_RESPONSES,
    summary="Send the next chat message for a session",
)
async def chat(body: ChatRequest, assistant: AssistantDep) -> ChatResponse:
    reply = await assistant.chat(body.session_id, body.text)
    return ChatResponse(response=reply)


@router.get(
    "/chat/{session_id}/history",
    response_model=ChatHistoryResponse,
    summary="Return a session's chat history",
)
async def get_chat_history(session_id: str, assistant: AssistantDep) -> ChatHistoryResponse:
    return ChatHistoryResponse(session_id=session_id, history=assistant.get_history(session_id))


@router.delete(
    "/chat/{session_id}/history",
    response_model=ChatHistoryResponse,
    summary="Clear a session's chat history",
)
async def clear_chat_history(session_id: str, assistant: AssistantDep) -> ChatHistoryResponse:
    assistant.clear_history(session_id)
    return ChatHistoryResponse(session_id=session_id, history=[])


# ---------------------------------------------------------------------------
# Corpus
# ---------------------------------------------------------------------------


@router.post(
    "/corpus/ask",
    response_model=CorpusAnswerResponse,
    responses=_ERROR_RESPONSES,
    summary="Answer a question from the three closest chunks",
)
async def ask_corpus(body: QueryRequest, review: ReviewDep) -> CorpusAnswerResponse:
    answer = await review.ask_corpus(body.query)
    return CorpusAnswerResponse(query=answer.query, answer=answer.answer, matches=answer.matches)


@router.get(
    "/corpus/stats",
    response_model=CorpusStatsResponse,
    responses=_ERROR_RESPONSES,
    summary="Get vector store statistics",
)
async def corpus_stats(ingestion: IngestionDep) -> CorpusStatsResponse:
    stats = await ingestion.get_corpus_stats()
    return CorpusStatsResponse(
        total_chunks=stats.total_chunks,
        provider=stats.provider,
        collection=stats.collection,
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability.

    ``healthy`` needs the completion, embedding and vector store providers
    to be available; an empty corpus downgrades the status to ``degraded``.
    """
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))

    vector_store = getattr(request.app.state, "vector_store", None)
    if vector_store is not None:
        try:
            stats = await vector_store.get_stats()
            providers["corpus_chunks"] = stats.total_chunks
        except Exception as exc:
            _logger.warning("health_corpus_check_failed", error=str(exc))
            providers["corpus_chunks"] = 0
            providers["vector_store"] = False

    critical_ok = all(
        providers.get(name, False) for name in ("llm", "embedding", "vector_store")
    )
    if critical_ok and providers.get("corpus_chunks", 0) > 0:
        status = "healthy"
    elif critical_ok:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=providers,
    )
