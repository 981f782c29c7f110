"""Structured results returned to callers.

The first group mirrors the JSON shapes the completion model is instructed
to produce (see ``services/prompt_builder.py``).  The assistant service
validates the normalized model output against these models, so a caller
either gets a complete object or a ``ResponseParseError``, never a
half-filled result.

The second group describes the contract-review and corpus-question
operations, whose answers are free text.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lexassist.models.document import RetrievalMatch


# ---------------------------------------------------------------------------
# Model-produced JSON shapes
# ---------------------------------------------------------------------------
class Vulnerability(BaseModel):
    model_config = ConfigDict(frozen=True)

    issue: str
    risk_level: str
    details: str


class ReportSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    vulnerabilities: list[Vulnerability] = Field(default_factory=list)


class VulnerabilityReport(BaseModel):
    """Vulnerability analysis of the ingested document(s)."""

    model_config = ConfigDict(frozen=True)

    document_name: str
    summary: str
    sections: list[ReportSection]


class EmailDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    body: str


class ChatReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    response: str


class NoticeDraft(BaseModel):
    """Formal notice generated from a vulnerability report."""

    model_config = ConfigDict(frozen=True)

    document_name: str
    recipient: str
    subject: str
    body: str
    sections: list[ReportSection] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Free-text review results
# ---------------------------------------------------------------------------
class ContractReview(BaseModel):
    """Outcome of reviewing one contract file."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    chunks_indexed: int = Field(default=0, ge=0)
    review: str = Field(description="The model's list of potential issues, as free text.")


class CorpusAnswer(BaseModel):
    """Answer to a batch question over the stored corpus."""

    model_config = ConfigDict(frozen=True)

    query: str
    answer: str
    matches: list[RetrievalMatch] = Field(default_factory=list)
