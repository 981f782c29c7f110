"""Pydantic request/response schemas for the lexassist API.

Request schemas end with ``Request`` and response schemas with
``Response``.  Successful assistant responses use the envelope
``{"success": true, "response": ...}``; every error, whatever the
endpoint, is an :class:`ErrorResponse`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from lexassist.models.conversation import ConversationTurn
from lexassist.models.document import RetrievalMatch
from lexassist.models.responses import ChatReply, EmailDraft, NoticeDraft, VulnerabilityReport


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class IngestRequest(BaseModel):
    """Raw document text to chunk, embed and store."""

    text: str = Field(min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)


class VulnerabilityRequest(BaseModel):
    query: str | None = Field(
        default=None,
        description="Defaults to asking for the vulnerabilities in the document.",
    )


class QueryRequest(BaseModel):
    """A single free-text request (email drafting, corpus questions)."""

    query: str


class ChatRequest(BaseModel):
    session_id: str = Field(min_length=1, description="Opaque caller-supplied session id.")
    text: str


class NoticeRequest(BaseModel):
    report: VulnerabilityReport
    recipient: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class IngestResponse(BaseModel):
    success: bool = True
    source: str = ""
    chunks_created: int
    ingestion_time: float


class VulnerabilityResponse(BaseModel):
    success: bool = True
    response: VulnerabilityReport


class EmailResponse(BaseModel):
    success: bool = True
    response: EmailDraft


class NoticeResponse(BaseModel):
    success: bool = True
    response: NoticeDraft


class ChatResponse(BaseModel):
    success: bool = True
    response: ChatReply


class ChatHistoryResponse(BaseModel):
    success: bool = True
    session_id: str
    history: list[ConversationTurn] = Field(default_factory=list)


class CorpusAnswerResponse(BaseModel):
    success: bool = True
    query: str
    answer: str
    matches: list[RetrievalMatch] = Field(default_factory=list)


class CorpusStatsResponse(BaseModel):
    total_chunks: int
    provider: str
    collection: str


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    success: bool = False
    error: str
    detail: str | None = None
    raw_text: str | None = None
