"""Document, chunk and vector-store data models.

Defines Pydantic v2 models for the ingestion and retrieval side of the
assistant.  All models are frozen so a chunk cannot be edited after the
chunker hands it out.

Lifecycle overview:

    1. A :class:`Document` (raw text + metadata) arrives from the API, the
       CLI, or the text extractor.  It is never stored as-is.
    2. The chunker turns it into ordered :class:`DocumentChunk` objects.
    3. The ingestion service pairs each chunk with its embedding to form a
       :class:`VectorRecord`, which is what the vector store persists.
    4. At query time the vector store returns :class:`RetrievalMatch`
       objects; the prompt builder reads their ``text``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Document -- ingestion input.
# ---------------------------------------------------------------------------
class Document(BaseModel):
    """Raw document text plus free-form metadata (category, source label)."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Full document text.")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description='Free-form labels copied onto every chunk, e.g. {"category": "IP Law"}.',
    )


# ---------------------------------------------------------------------------
# DocumentChunk -- the unit the chunker emits.
# ---------------------------------------------------------------------------
class DocumentChunk(BaseModel):
    """A minimal retrievable unit of document text.

    Either a whole section header ("3. Termination") or one sentence of
    body text.  Ids are uuid4 strings generated per chunk, so re-chunking
    the same text never reuses an id.
    """

    model_config = ConfigDict(frozen=True)

    chunk_id: str = Field(description="Unique identifier (UUID) for this chunk.")
    text: str = Field(description="Trimmed, non-empty chunk text.")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata inherited from the parent document.",
    )

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("chunk text must not be empty")
        return value


# ---------------------------------------------------------------------------
# VectorRecord -- what the vector store persists.
# ---------------------------------------------------------------------------
class VectorRecord(BaseModel):
    """A chunk id, its embedding, and the metadata stored alongside it.

    ``metadata`` always contains ``text`` so retrieval can rebuild prompt
    context without a second lookup.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="The source chunk id; upserts overwrite by id.")
    values: list[float] = Field(description="Embedding vector of the chunk text.")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="{text, ...document metadata}.",
    )

    @classmethod
    def from_chunk(cls, chunk: DocumentChunk, values: list[float]) -> VectorRecord:
        """Build a record from a chunk and its embedding."""
        return cls(
            id=chunk.chunk_id,
            values=values,
            metadata={**chunk.metadata, "text": chunk.text},
        )


# ---------------------------------------------------------------------------
# RetrievalMatch -- a similarity-search hit.
# ---------------------------------------------------------------------------
class RetrievalMatch(BaseModel):
    """A vector-store query hit, in store ranking order."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Id of the matched record.")
    score: float = Field(default=0.0, description="Store-defined similarity score.")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        value = self.metadata.get("text")
        return value if isinstance(value, str) else ""


# ---------------------------------------------------------------------------
# Ingestion / corpus summaries.
# ---------------------------------------------------------------------------
class IngestionResult(BaseModel):
    """Summary of a single document ingestion run."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(default="", description="Source label of the ingested document.")
    chunks_created: int = Field(default=0, ge=0, description="Number of records upserted.")
    ingestion_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Wall-clock time in seconds for the ingestion run.",
    )


class CorpusStats(BaseModel):
    """Size of the vector-store corpus."""

    model_config = ConfigDict(frozen=True)

    total_chunks: int = Field(default=0, ge=0)
    provider: str = Field(default="", description="Vector store backend name.")
    collection: str = Field(default="", description="Collection / namespace name.")
