"""Unit tests for AssistantService -- vulnerabilities, email, chat, notice."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from lexassist.models.conversation import ConversationTurn, Role
from lexassist.models.responses import VulnerabilityReport
from lexassist.providers.conversation.memory_store import InMemoryConversationStore
from lexassist.services.assistant_service import AssistantService
from lexassist.services.prompt_builder import DEFAULT_VULNERABILITY_QUERY, PromptBuilder
from lexassist.utils.errors import CompletionError, ResponseParseError, UnsupportedInputError


@pytest.fixture()
def service(
    mock_embedding_provider: MagicMock,
    mock_vector_store: MagicMock,
    mock_llm: MagicMock,
    conversation_store: InMemoryConversationStore,
) -> AssistantService:
    builder = PromptBuilder(mock_embedding_provider, mock_vector_store, top_k=5)
    return AssistantService(
        builder,
        mock_llm,
        conversation_store,
        generation={"email": {"temperature": 0.5, "max_tokens": 1500}},
    )


# ======================================================================
# Vulnerability analysis
# ======================================================================


class TestAnalyzeVulnerabilities:
    @pytest.mark.asyncio
    async def test_fenced_json_parsed(
        self, service: AssistantService, mock_llm: MagicMock, vulnerability_json: str
    ) -> None:
        mock_llm.generate = AsyncMock(return_value=f"```json\n{vulnerability_json}\n```")
        report = await service.analyze_vulnerabilities()

        assert report.document_name == "Services Agreement"
        assert report.sections[0].vulnerabilities[0].risk_level == "High"
        prompt = mock_llm.generate.await_args.args[0]
        assert DEFAULT_VULNERABILITY_QUERY in prompt
        assert "All intellectual property belongs to the Client." in prompt

    @pytest.mark.asyncio
    async def test_custom_query_reaches_retrieval(
        self,
        service: AssistantService,
        mock_llm: MagicMock,
        mock_embedding_provider: MagicMock,
        vulnerability_json: str,
    ) -> None:
        mock_llm.generate = AsyncMock(return_value=vulnerability_json)
        await service.analyze_vulnerabilities("check the IP clause")
        mock_embedding_provider.embed_single.assert_awaited_once_with("check the IP clause")

    @pytest.mark.asyncio
    async def test_blank_query_rejected_before_any_call(
        self, service: AssistantService, mock_llm: MagicMock, mock_embedding_provider: MagicMock
    ) -> None:
        with pytest.raises(UnsupportedInputError):
            await service.analyze_vulnerabilities("   ")
        mock_embedding_provider.embed_single.assert_not_awaited()
        mock_llm.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_json_keeps_raw_text(self, service: AssistantService, mock_llm: MagicMock) -> None:
        mock_llm.generate = AsyncMock(return_value="not json")
        with pytest.raises(ResponseParseError) as exc_info:
            await service.analyze_vulnerabilities()
        assert exc_info.value.raw_text == "not json"

    @pytest.mark.asyncio
    async def test_wrong_shape_is_parse_error(self, service: AssistantService, mock_llm: MagicMock) -> None:
        mock_llm.generate = AsyncMock(return_value='{"summary": "missing fields"}')
        with pytest.raises(ResponseParseError, match="VulnerabilityReport") as exc_info:
            await service.analyze_vulnerabilities()
        assert exc_info.value.raw_text == '{"summary": "missing fields"}'


# ======================================================================
# Email
# ======================================================================


class TestDraftEmail:
    @pytest.mark.asyncio
    async def test_uses_email_generation_params(
        self, service: AssistantService, mock_llm: MagicMock
    ) -> None:
        mock_llm.generate = AsyncMock(return_value='{"subject": "IP terms", "body": "Dear Client"}')
        email = await service.draft_email("email the client about IP")

        assert email.subject == "IP terms"
        assert email.body == "Dear Client"
        kwargs = mock_llm.generate.await_args.kwargs
        assert kwargs == {"temperature": 0.5, "max_tokens": 1500}

    @pytest.mark.asyncio
    async def test_completion_error_propagates(self, service: AssistantService, mock_llm: MagicMock) -> None:
        mock_llm.generate = AsyncMock(side_effect=CompletionError("timeout", provider_name="openai"))
        with pytest.raises(CompletionError):
            await service.draft_email("email the client")


# ======================================================================
# Chat
# ======================================================================


class TestChat:
    @pytest.mark.asyncio
    async def test_history_grows_by_two_and_feeds_next_prompt(
        self,
        service: AssistantService,
        mock_llm: MagicMock,
        conversation_store: InMemoryConversationStore,
    ) -> None:
        mock_llm.generate = AsyncMock(
            side_effect=['{"response": "IP is intellectual property."}', '{"response": "The Client."}']
        )

        first = await service.chat("s1", "What is IP?")
        assert first.response == "IP is intellectual property."
        assert len(conversation_store.get("s1")) == 2

        await service.chat("s1", "Who owns it?")
        history = service.get_history("s1")
        assert [t.render() for t in history] == [
            "user: What is IP?",
            'bot: {"response": "IP is intellectual property."}',
            "user: Who owns it?",
            'bot: {"response": "The Client."}',
        ]

        second_prompt = mock_llm.generate.await_args_list[1].args[0]
        assert "user: What is IP?" in second_prompt
        assert "user: Who owns it?" in second_prompt

    @pytest.mark.asyncio
    async def test_failed_completion_leaves_history_untouched(
        self,
        service: AssistantService,
        mock_llm: MagicMock,
        conversation_store: InMemoryConversationStore,
    ) -> None:
        conversation_store.append("s1", ConversationTurn(role=Role.USER, content="earlier"))
        mock_llm.generate = AsyncMock(side_effect=CompletionError("down"))

        with pytest.raises(CompletionError):
            await service.chat("s1", "hello?")
        assert [t.content for t in conversation_store.get("s1")] == ["earlier"]

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(
        self, service: AssistantService, conversation_store: InMemoryConversationStore
    ) -> None:
        await service.chat("a", "hi from a")
        assert service.get_history("b") == []
        assert conversation_store.session_count() == 1

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, service: AssistantService) -> None:
        with pytest.raises(UnsupportedInputError):
            await service.chat("s1", "")
        with pytest.raises(UnsupportedInputError):
            await service.chat(" ", "hi")

    @pytest.mark.asyncio
    async def test_clear_history(self, service: AssistantService) -> None:
        await service.chat("s1", "hi")
        service.clear_history("s1")
        assert service.get_history("s1") == []


# ======================================================================
# Notice
# ======================================================================


class TestDraftNotice:
    @pytest.mark.asyncio
    async def test_notice_from_report(
        self, service: AssistantService, mock_llm: MagicMock, vulnerability_json: str,
        mock_embedding_provider: MagicMock,
    ) -> None:
        report = VulnerabilityReport.model_validate_json(vulnerability_json)
        mock_llm.generate = AsyncMock(
            return_value=(
                '{"document_name": "Services Agreement", "recipient": "Acme Ltd", '
                '"subject": "Notice of IP concerns", "body": "Please amend clause 2."}'
            )
        )

        notice = await service.draft_notice(report, recipient="Acme Ltd")

        assert notice.recipient == "Acme Ltd"
        assert notice.sections == []
        prompt = mock_llm.generate.await_args.args[0]
        assert "Broad assignment" in prompt
        assert "addressed to Acme Ltd" in prompt
        mock_embedding_provider.embed_single.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_report_rejected(self, service: AssistantService, mock_llm: MagicMock) -> None:
        report = VulnerabilityReport(document_name="NDA", summary="Nothing found.", sections=[])
        with pytest.raises(UnsupportedInputError):
            await service.draft_notice(report)
        mock_llm.generate.assert_not_awaited()
