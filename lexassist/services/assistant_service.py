"""Query-side composition: prompt builder -> completion model -> normalizer.

Every interactive operation follows the same four steps:

  1. VALIDATE   -- reject a blank query with UnsupportedInputError before
                   any network call is made.
  2. PROMPT     -- PromptBuilder embeds the query, retrieves the top-K
                   chunks (K=5) and renders the mode's template.
  3. GENERATE   -- the completion provider returns raw text.
  4. NORMALIZE  -- fences are stripped, JSON is parsed, and the result is
                   validated against the mode's pydantic model.  Any
                   mismatch raises ResponseParseError with the raw text.

Chat additionally reads and writes the injected conversation store.  The
user turn and the bot turn are appended together, and only once the
completion has succeeded, so a failed exchange leaves history untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from lexassist.models.conversation import ConversationTurn, Role
from lexassist.models.responses import ChatReply, EmailDraft, NoticeDraft, VulnerabilityReport
from lexassist.services.prompt_builder import (
    DEFAULT_VULNERABILITY_QUERY,
    PromptMode,
    render_notice_prompt,
)
from lexassist.services.response_normalizer import normalize, strip_code_fences
from lexassist.utils.errors import ResponseParseError, UnsupportedInputError

if TYPE_CHECKING:
    from lexassist.interfaces.conversation_store import IConversationStore
    from lexassist.interfaces.llm_provider import ILLMProvider
    from lexassist.services.prompt_builder import PromptBuilder

logger = structlog.get_logger(logger_name=__name__)

_M = TypeVar("_M", bound=BaseModel)

# Sampling parameters used when no per-operation config is supplied.
_DEFAULT_GENERATION: dict[str, Any] = {"temperature": 0.3, "max_tokens": 4000}


class AssistantService:
    """Answers vulnerability, email, chat and notice requests.

    Parameters
    ----------
    prompt_builder:
        Retrieval + template rendering.
    llm:
        Completion provider.
    conversation_store:
        Per-session chat history.
    generation:
        Optional ``{operation: {"temperature", "max_tokens"}}`` mapping,
        keyed by ``vulnerabilities``, ``email``, ``chat`` and ``notice``.
    """

    def __init__(
        self,
        prompt_builder: PromptBuilder,
        llm: ILLMProvider,
        conversation_store: IConversationStore,
        generation: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self._prompt_builder = prompt_builder
        self._llm = llm
        self._conversations = conversation_store
        self._generation = generation or {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def analyze_vulnerabilities(self, query: str | None = None) -> VulnerabilityReport:
        """List the legal vulnerabilities found in the ingested documents."""
        query = DEFAULT_VULNERABILITY_QUERY if query is None else query
        self._require_text(query, "Query")
        prompt = await self._prompt_builder.build_prompt(query, [], PromptMode.VULNERABILITY)
        raw = await self._generate(prompt, "vulnerabilities")
        return self._parse(raw, VulnerabilityReport)

    async def draft_email(self, query: str) -> EmailDraft:
        """Draft an email answering *query* from the ingested documents."""
        self._require_text(query, "Query")
        prompt = await self._prompt_builder.build_prompt(query, [], PromptMode.EMAIL)
        raw = await self._generate(prompt, "email")
        return self._parse(raw, EmailDraft)

    async def chat(self, session_id: str, message: str) -> ChatReply:
        """Answer the next message in a session's conversation."""
        self._require_text(session_id, "Session id")
        self._require_text(message, "Message")

        user_turn = ConversationTurn(role=Role.USER, content=message)
        history = [*self._conversations.get(session_id), user_turn]

        prompt = await self._prompt_builder.build_prompt(message, history, PromptMode.CHAT)
        raw = await self._generate(prompt, "chat")

        bot_turn = ConversationTurn(role=Role.BOT, content=strip_code_fences(raw))
        self._conversations.append(session_id, user_turn, bot_turn)
        logger.info("chat_turn_recorded", session_id=session_id, history_turns=len(history) + 1)

        return self._parse(raw, ChatReply)

    def get_history(self, session_id: str) -> list[ConversationTurn]:
        return self._conversations.get(session_id)

    def clear_history(self, session_id: str) -> None:
        self._conversations.clear(session_id)
        logger.info("chat_history_cleared", session_id=session_id)

    async def draft_notice(
        self,
        report: VulnerabilityReport,
        recipient: str | None = None,
    ) -> NoticeDraft:
        """Turn a vulnerability report into a formal notice.

        No retrieval happens here: the report itself is the context.
        """
        if not report.sections:
            raise UnsupportedInputError(message="Report contains no sections to give notice about")
        prompt = render_notice_prompt(report.model_dump(), recipient)
        raw = await self._generate(prompt, "notice")
        return self._parse(raw, NoticeDraft)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _generate(self, prompt: str, operation: str) -> str:
        params = {**_DEFAULT_GENERATION, **self._generation.get(operation, {})}
        raw = await self._llm.generate(
            prompt,
            temperature=params["temperature"],
            max_tokens=params["max_tokens"],
        )
        logger.info(
            "completion_received",
            operation=operation,
            provider=self._llm.get_provider_name(),
            chars=len(raw),
        )
        return raw

    @staticmethod
    def _parse(raw: str, model: type[_M]) -> _M:
        """Normalize *raw* and validate it into *model*."""
        data = normalize(raw)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "response_shape_invalid",
                expected=model.__name__,
                errors=exc.error_count(),
            )
            raise ResponseParseError(
                message=f"Model response does not match {model.__name__}: {exc.errors()[0]['msg']}",
                raw_text=raw,
            ) from exc

    @staticmethod
    def _require_text(value: str | None, label: str) -> None:
        if value is None or not value.strip():
            raise UnsupportedInputError(message=f"{label} is required.")
