"""Integration tests for the lexassist API endpoints using TestClient.

The router is mounted on a bare FastAPI app whose state holds real
services wired to mocked providers, so request validation, service logic
and error mapping are all exercised without network calls.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from lexassist.api.middleware import register_error_handlers
from lexassist.api.routes import router as api_router
from lexassist.providers.conversation.memory_store import InMemoryConversationStore
from lexassist.services.assistant_service import AssistantService
from lexassist.services.contract_review_service import ContractReviewService
from lexassist.services.ingestion.chunker import TextChunker
from lexassist.services.ingestion.ingestion_service import IngestionService
from lexassist.services.ingestion.text_extractor import TextExtractor
from lexassist.services.prompt_builder import PromptBuilder
from lexassist.utils.errors import CompletionError, EmbeddingError, RetrievalError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_app(
    embedder: MagicMock,
    store: MagicMock,
    llm: MagicMock,
    provider_registry: dict | None = None,
) -> FastAPI:
    extractor = TextExtractor()
    ingestion = IngestionService(
        TextChunker(), embedder, store, extractor=extractor, default_metadata={}
    )
    builder = PromptBuilder(embedder, store, top_k=5)

    app = FastAPI()
    register_error_handlers(app)
    app.include_router(api_router)

    app.state.ingestion_service = ingestion
    app.state.assistant_service = AssistantService(builder, llm, InMemoryConversationStore())
    app.state.review_service = ContractReviewService(extractor, ingestion, builder, llm, top_k=3)
    app.state.vector_store = store
    app.state.default_category = "IP Law"
    app.state.version = "0.1.0"
    app.state.provider_registry = provider_registry or {
        "llm": True,
        "embedding": True,
        "vector_store": True,
    }
    return app


@pytest.fixture()
def client(
    mock_embedding_provider: MagicMock,
    mock_vector_store: MagicMock,
    mock_llm: MagicMock,
) -> TestClient:
    return TestClient(_create_app(mock_embedding_provider, mock_vector_store, mock_llm))


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


class TestDocuments:
    def test_ingest_applies_default_category(
        self, client: TestClient, mock_vector_store: MagicMock, sample_contract: str
    ) -> None:
        response = client.post("/api/v1/documents", json={"text": sample_contract})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["chunks_created"] == 7
        records = mock_vector_store.upsert.await_args.args[0]
        assert all(r.metadata["category"] == "IP Law" for r in records)

    def test_explicit_category_kept(self, client: TestClient, mock_vector_store: MagicMock) -> None:
        client.post(
            "/api/v1/documents",
            json={"text": "One clause.", "metadata": {"category": "Employment"}},
        )
        record = mock_vector_store.upsert.await_args.args[0][0]
        assert record.metadata["category"] == "Employment"

    def test_empty_text_is_validation_error(self, client: TestClient) -> None:
        assert client.post("/api/v1/documents", json={"text": ""}).status_code == 422

    def test_embedding_failure_is_502(
        self, client: TestClient, mock_embedding_provider: MagicMock, mock_vector_store: MagicMock
    ) -> None:
        mock_embedding_provider.embed_single = AsyncMock(
            side_effect=EmbeddingError("quota", provider_name="openai_embedding")
        )
        response = client.post("/api/v1/documents", json={"text": "One. Two."})

        assert response.status_code == 502
        assert response.json() == {"success": False, "error": "EmbeddingError", "detail": "quota"}
        mock_vector_store.upsert.assert_not_awaited()


# ---------------------------------------------------------------------------
# Assistant operations
# ---------------------------------------------------------------------------


class TestVulnerabilities:
    def test_success_envelope(
        self, client: TestClient, mock_llm: MagicMock, vulnerability_json: str
    ) -> None:
        mock_llm.generate = AsyncMock(return_value=f"```json\n{vulnerability_json}\n```")
        response = client.post("/api/v1/vulnerabilities", json={})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["response"]["document_name"] == "Services Agreement"

    def test_unparseable_output_is_502_with_raw_text(
        self, client: TestClient, mock_llm: MagicMock
    ) -> None:
        mock_llm.generate = AsyncMock(return_value="not json")
        response = client.post("/api/v1/vulnerabilities", json={"query": "issues?"})

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "ResponseParseError"
        assert body["raw_text"] == "not json"

    def test_blank_query_is_400(self, client: TestClient, mock_llm: MagicMock) -> None:
        response = client.post("/api/v1/vulnerabilities", json={"query": "  "})
        assert response.status_code == 400
        assert response.json()["error"] == "UnsupportedInputError"
        mock_llm.generate.assert_not_awaited()

    def test_retrieval_failure_is_502(self, client: TestClient, mock_vector_store: MagicMock) -> None:
        mock_vector_store.query = AsyncMock(side_effect=RetrievalError("index missing"))
        response = client.post("/api/v1/vulnerabilities", json={})
        assert response.status_code == 502
        assert response.json()["error"] == "RetrievalError"


class TestEmail:
    def test_success(self, client: TestClient, mock_llm: MagicMock) -> None:
        mock_llm.generate = AsyncMock(return_value='{"subject": "S", "body": "B"}')
        response = client.post("/api/v1/email", json={"query": "email the client"})
        assert response.status_code == 200
        assert response.json()["response"] == {"subject": "S", "body": "B"}

    def test_completion_failure_is_502(self, client: TestClient, mock_llm: MagicMock) -> None:
        mock_llm.generate = AsyncMock(side_effect=CompletionError("timed out", provider_name="openai"))
        response = client.post("/api/v1/email", json={"query": "email the client"})
        assert response.status_code == 502
        assert response.json()["detail"] == "timed out"


class TestChat:
    def test_history_round_trip(self, client: TestClient, mock_llm: MagicMock) -> None:
        mock_llm.generate = AsyncMock(return_value='{"response": "Hello."}')

        response = client.post("/api/v1/chat", json={"session_id": "abc", "text": "Hi"})
        assert response.status_code == 200
        assert response.json()["response"] == {"response": "Hello."}

        history = client.get("/api/v1/chat/abc/history").json()["history"]
        assert history == [
            {"role": "user", "content": "Hi"},
            {"role": "bot", "content": '{"response": "Hello."}'},
        ]

        cleared = client.delete("/api/v1/chat/abc/history").json()
        assert cleared["history"] == []
        assert client.get("/api/v1/chat/abc/history").json()["history"] == []

    def test_empty_message_is_400(self, client: TestClient) -> None:
        response = client.post("/api/v1/chat", json={"session_id": "abc", "text": ""})
        assert response.status_code == 400


class TestNotice:
    def test_notice(self, client: TestClient, mock_llm: MagicMock, vulnerability_json: str) -> None:
        mock_llm.generate = AsyncMock(
            return_value=(
                '{"document_name": "Services Agreement", "recipient": "Acme", '
                '"subject": "Notice", "body": "Amend clause 2."}'
            )
        )
        response = client.post(
            "/api/v1/notice",
            json={"report": json.loads(vulnerability_json), "recipient": "Acme"},
        )
        assert response.status_code == 200
        assert response.json()["response"]["recipient"] == "Acme"


# ---------------------------------------------------------------------------
# Corpus + health
# ---------------------------------------------------------------------------


class TestCorpus:
    def test_ask(self, client: TestClient, mock_llm: MagicMock, mock_vector_store: MagicMock) -> None:
        mock_llm.generate = AsyncMock(return_value="The Client.")
        response = client.post("/api/v1/corpus/ask", json={"query": "Who owns the IP?"})

        assert response.status_code == 200
        body = response.json()
        assert body["answer"] == "The Client."
        assert [m["id"] for m in body["matches"]] == ["m1", "m2"]
        assert mock_vector_store.query.await_args.kwargs["top_k"] == 3

    def test_stats(self, client: TestClient) -> None:
        response = client.get("/api/v1/corpus/stats")
        assert response.json() == {"total_chunks": 2, "provider": "mock", "collection": "test"}


class TestHealth:
    def test_healthy(self, client: TestClient) -> None:
        body = client.get("/api/v1/health").json()
        assert body["status"] == "healthy"
        assert body["providers"]["corpus_chunks"] == 2

    def test_degraded_when_corpus_empty(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
        mock_llm: MagicMock,
    ) -> None:
        from lexassist.models.document import CorpusStats

        mock_vector_store.get_stats = AsyncMock(return_value=CorpusStats(total_chunks=0))
        client = TestClient(_create_app(mock_embedding_provider, mock_vector_store, mock_llm))
        assert client.get("/api/v1/health").json()["status"] == "degraded"

    def test_unhealthy_when_llm_unavailable(
        self,
        mock_embedding_provider: MagicMock,
        mock_vector_store: MagicMock,
        mock_llm: MagicMock,
    ) -> None:
        app = _create_app(
            mock_embedding_provider,
            mock_vector_store,
            mock_llm,
            provider_registry={"llm": False, "embedding": True, "vector_store": True},
        )
        assert TestClient(app).get("/api/v1/health").json()["status"] == "unhealthy"
