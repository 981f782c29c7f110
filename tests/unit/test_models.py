"""Unit tests for lexassist pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lexassist.models.conversation import ConversationTurn, Role
from lexassist.models.document import DocumentChunk, RetrievalMatch, VectorRecord
from lexassist.models.responses import ChatReply, VulnerabilityReport


class TestDocumentChunk:
    def test_blank_text_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DocumentChunk(chunk_id="c1", text="   ")

    def test_frozen(self) -> None:
        chunk = DocumentChunk(chunk_id="c1", text="Clause.")
        with pytest.raises(ValidationError):
            chunk.text = "changed"


class TestVectorRecord:
    def test_from_chunk_carries_text_and_metadata(self) -> None:
        chunk = DocumentChunk(chunk_id="c1", text="Clause.", metadata={"category": "IP Law"})
        record = VectorRecord.from_chunk(chunk, [0.1, 0.2])
        assert record.id == "c1"
        assert record.values == [0.1, 0.2]
        assert record.metadata == {"category": "IP Law", "text": "Clause."}


class TestRetrievalMatch:
    def test_text_from_metadata(self) -> None:
        assert RetrievalMatch(id="m", metadata={"text": "Clause."}).text == "Clause."

    @pytest.mark.parametrize("metadata", [{}, {"text": None}, {"text": 42}])
    def test_missing_or_non_string_text(self, metadata: dict) -> None:
        assert RetrievalMatch(id="m", metadata=metadata).text == ""


class TestConversationTurn:
    def test_render(self) -> None:
        assert ConversationTurn(role=Role.BOT, content="Hello.").render() == "bot: Hello."

    def test_role_from_string(self) -> None:
        assert ConversationTurn(role="user", content="Hi").role == "user"

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConversationTurn(role="system", content="Hi")


class TestResponseShapes:
    def test_vulnerability_report_requires_sections(self) -> None:
        with pytest.raises(ValidationError):
            VulnerabilityReport.model_validate({"document_name": "NDA", "summary": "s"})

    def test_vulnerability_report_parses(self, vulnerability_json: str) -> None:
        report = VulnerabilityReport.model_validate_json(vulnerability_json)
        assert report.sections[0].vulnerabilities[0].issue == "Broad assignment"

    def test_chat_reply(self) -> None:
        assert ChatReply.model_validate({"response": "ok"}).response == "ok"
