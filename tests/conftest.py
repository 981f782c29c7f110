"""Shared pytest fixtures for the lexassist test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from lexassist.interfaces.embedding_provider import IEmbeddingProvider
from lexassist.interfaces.llm_provider import ILLMProvider
from lexassist.interfaces.vector_store_provider import IVectorStoreProvider
from lexassist.models.document import CorpusStats, RetrievalMatch
from lexassist.providers.conversation.memory_store import InMemoryConversationStore

EMBEDDING_DIM = 8

SAMPLE_CONTRACT = (
    "1. Definitions\n"
    "Confidential Information means any non-public information disclosed by either party.\n"
    "2. Ownership\n"
    "All intellectual property created under this Agreement belongs to the Client. "
    "The Contractor assigns all rights on creation.\n"
    "3. Termination\n"
    "Either party may terminate on thirty days written notice."
)


def make_match(match_id: str, text: str, score: float = 0.9, **metadata: Any) -> RetrievalMatch:
    return RetrievalMatch(id=match_id, score=score, metadata={"text": text, **metadata})


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def sample_contract() -> str:
    return SAMPLE_CONTRACT


@pytest.fixture
def sample_matches() -> list[RetrievalMatch]:
    return [
        make_match("m1", "All intellectual property belongs to the Client.", 0.92),
        make_match("m2", "Either party may terminate on thirty days written notice.", 0.81),
    ]


@pytest.fixture
def vulnerability_json() -> str:
    return (
        '{"document_name": "Services Agreement", "summary": "One-sided IP clause.", '
        '"sections": [{"title": "Ownership", "description": "IP assignment", '
        '"vulnerabilities": [{"issue": "Broad assignment", "risk_level": "High", '
        '"details": "Assigns pre-existing IP."}]}]}'
    )


# ---------------------------------------------------------------------------
# Provider mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MagicMock:
    mock = MagicMock(spec=IEmbeddingProvider)
    mock.embed_single = AsyncMock(return_value=[0.1] * EMBEDDING_DIM)
    mock.embed = AsyncMock(return_value=[[0.1] * EMBEDDING_DIM])
    mock.get_dimension.return_value = EMBEDDING_DIM
    mock.get_provider_name.return_value = "mock_embedding"
    mock.is_available.return_value = True
    return mock


@pytest.fixture
def mock_vector_store(sample_matches: list[RetrievalMatch]) -> MagicMock:
    mock = MagicMock(spec=IVectorStoreProvider)
    mock.upsert = AsyncMock(side_effect=lambda records: len(records))
    mock.query = AsyncMock(return_value=sample_matches)
    mock.count = AsyncMock(return_value=len(sample_matches))
    mock.get_stats = AsyncMock(
        return_value=CorpusStats(total_chunks=len(sample_matches), provider="mock", collection="test")
    )
    mock.get_provider_name.return_value = "mock_store"
    mock.is_available.return_value = True
    return mock


@pytest.fixture
def mock_llm() -> MagicMock:
    mock = MagicMock(spec=ILLMProvider)
    mock.generate = AsyncMock(return_value='{"response": "ok"}')
    mock.get_provider_name.return_value = "mock_llm"
    mock.is_available.return_value = True
    mock.validate_credentials = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def conversation_store() -> InMemoryConversationStore:
    return InMemoryConversationStore()
