"""Pydantic data models for documents, retrieval, conversations and results."""

from lexassist.models.conversation import ConversationTurn, Role
from lexassist.models.document import (
    CorpusStats,
    Document,
    DocumentChunk,
    IngestionResult,
    RetrievalMatch,
    VectorRecord,
)
from lexassist.models.responses import (
    ChatReply,
    ContractReview,
    CorpusAnswer,
    EmailDraft,
    NoticeDraft,
    ReportSection,
    Vulnerability,
    VulnerabilityReport,
)

__all__ = [
    "ChatReply",
    "ContractReview",
    "ConversationTurn",
    "CorpusAnswer",
    "CorpusStats",
    "Document",
    "DocumentChunk",
    "EmailDraft",
    "IngestionResult",
    "NoticeDraft",
    "ReportSection",
    "RetrievalMatch",
    "Role",
    "VectorRecord",
    "Vulnerability",
    "VulnerabilityReport",
]
