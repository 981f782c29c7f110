"""Retrieval-augmented prompt assembly.

Data flow for one query::

    query ──embed──► vector ──top-K──► matches ──join──► context
                                                        │
    history (chat only) ─────────────────────────────────┤
                                                        ▼
                                    mode template ──render──► prompt

Only the first two steps touch the network.  :func:`build_context` and
:func:`render_prompt` are pure functions, so the same matches, query and
history always give a byte-identical prompt.

Every mode's template ends with an instruction to answer with a single
JSON object of a named shape; :mod:`lexassist.services.response_normalizer`
parses that object on the way back.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Sequence

import structlog

from lexassist.models.conversation import ConversationTurn
from lexassist.models.document import RetrievalMatch
from lexassist.utils.errors import EmbeddingError, RetrievalError

if TYPE_CHECKING:
    from lexassist.interfaces.embedding_provider import IEmbeddingProvider
    from lexassist.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)


class PromptMode(str, Enum):
    """Which instruction template to render."""

    VULNERABILITY = "vulnerability"
    EMAIL = "email"
    CHAT = "chat"


# Fixed query used when vulnerability analysis is requested without one.
DEFAULT_VULNERABILITY_QUERY = "tell me the vulnerabilities in the document"

_CONTEXT_SEPARATOR = "\n\n"

_JSON_ONLY = (
    "Respond with a single JSON object only, with no surrounding prose "
    "and no code fences."
)

_VULNERABILITY_SHAPE = (
    '{"document_name": "document name here", "summary": "summary here", '
    '"sections": [{"title": "title here", "description": "description here", '
    '"vulnerabilities": [{"issue": "issue here", "risk_level": "risk level here", '
    '"details": "details here"}]}]}'
)
_EMAIL_SHAPE = '{"subject": "subject here", "body": "body of the email here"}'
_CHAT_SHAPE = '{"response": "your reply here"}'
_NOTICE_SHAPE = (
    '{"document_name": "document name here", "recipient": "recipient name here", '
    '"subject": "notice subject here", '
    '"body": "formal notice text including issue details, actions required, and deadline", '
    '"sections": [{"title": "issue identified", "description": "brief description", '
    '"vulnerabilities": [{"issue": "issue found", "risk_level": "High/Medium/Low", '
    '"details": "explanation of the risk and the necessary action"}]}]}'
)

_VULNERABILITY_TEMPLATE = (
    "Answer the following question based on the provided context:\n\n"
    "Context:\n{context}\n\n"
    "Question: {query}\n\n"
    "Return the answer strictly as JSON in this format:\n{shape}\n"
    "{json_only}"
)

_EMAIL_TEMPLATE = (
    "Generate an email as requested by the user based on the provided context:\n\n"
    "Context:\n{context}\n\n"
    "Request: {query}\n\n"
    "Return the email strictly as JSON in this format:\n{shape}\n"
    "{json_only}"
)

_CHAT_PREAMBLE = (
    "You are a highly knowledgeable and professional AI legal assistant designed "
    "to help small businesses, freelancers, and startups navigate legal "
    "complexities. Here is the conversation history:\n"
)

_CHAT_TEMPLATE = (
    "{preamble}{history}"
    "\nBased on the context:\n{context}\n\n"
    "Answer the user's last message: {query}\n\n"
    "Return the reply strictly as JSON in this format:\n{shape}\n"
    "{json_only}"
)

_NOTICE_TEMPLATE = (
    "Answer the following based on the provided context:\n\n"
    "Context:\n{context}\n\n"
    "Question: Generate a formal notice regarding the identified issues{recipient_clause}.\n\n"
    "Return the notice strictly as JSON in this format:\n{shape}\n"
    "{json_only}"
)

_REVIEW_TEMPLATE = (
    "Review this contract for legal risks and flaws, and produce a list of "
    "potential issues:\n\n{text}"
)

_CORPUS_QUESTION_TEMPLATE = (
    "Answer the question based on the provided context:\n\n"
    "Context:\n{context}\n\n"
    "Question: {query}"
)


# ---------------------------------------------------------------------------
# Pure rendering
# ---------------------------------------------------------------------------


def build_context(matches: Sequence[RetrievalMatch]) -> str:
    """Join match texts in store order with a blank line between them.

    Matches without text are skipped.  No matches gives ``""``.
    """
    return _CONTEXT_SEPARATOR.join(m.text for m in matches if m.text)


def render_history(history: Sequence[ConversationTurn]) -> str:
    """Render turns as ``role: content`` lines, oldest first."""
    return "".join(f"{turn.render()}\n" for turn in history)


def render_prompt(
    mode: PromptMode,
    context: str,
    query: str,
    history: Sequence[ConversationTurn] = (),
) -> str:
    """Fill the template for *mode*.  Deterministic for identical inputs."""
    if mode is PromptMode.VULNERABILITY:
        return _VULNERABILITY_TEMPLATE.format(
            context=context, query=query, shape=_VULNERABILITY_SHAPE, json_only=_JSON_ONLY
        )
    if mode is PromptMode.EMAIL:
        return _EMAIL_TEMPLATE.format(
            context=context, query=query, shape=_EMAIL_SHAPE, json_only=_JSON_ONLY
        )
    if mode is PromptMode.CHAT:
        return _CHAT_TEMPLATE.format(
            preamble=_CHAT_PREAMBLE,
            history=render_history(history),
            context=context,
            query=query,
            shape=_CHAT_SHAPE,
            json_only=_JSON_ONLY,
        )
    raise ValueError(f"Unknown prompt mode: {mode!r}")


def render_notice_prompt(report: dict, recipient: str | None = None) -> str:
    """Render the formal-notice prompt with a vulnerability report as context."""
    context = json.dumps(report, ensure_ascii=False, sort_keys=True)
    recipient_clause = f" addressed to {recipient}" if recipient else ""
    return _NOTICE_TEMPLATE.format(
        context=context,
        recipient_clause=recipient_clause,
        shape=_NOTICE_SHAPE,
        json_only=_JSON_ONLY,
    )


def render_review_prompt(text: str) -> str:
    """Render the free-text whole-contract review prompt."""
    return _REVIEW_TEMPLATE.format(text=text)


def render_corpus_question_prompt(context: str, query: str) -> str:
    """Render the free-text corpus question prompt."""
    return _CORPUS_QUESTION_TEMPLATE.format(context=context, query=query)


# ---------------------------------------------------------------------------
# Retrieval + rendering
# ---------------------------------------------------------------------------


class PromptBuilder:
    """Embeds a query, retrieves the nearest chunks, and renders a prompt.

    Parameters
    ----------
    embedding_provider:
        Embeds the query text.  Must be the provider used at ingestion time.
    vector_store:
        Source of the top-K matches.
    top_k:
        Default number of matches to retrieve (5 for interactive use).
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        top_k: int = 5,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._top_k = top_k

    @property
    def top_k(self) -> int:
        return self._top_k

    async def retrieve(self, query: str, top_k: int | None = None) -> list[RetrievalMatch]:
        """Embed *query* and return the store's top-K matches in ranking order.

        Raises
        ------
        EmbeddingError
            If the query cannot be embedded.
        RetrievalError
            If the similarity query fails.
        """
        k = top_k or self._top_k
        try:
            vector = await self._embedding_provider.embed_single(query)
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingError(
                message=f"Query embedding failed: {exc}",
                provider_name=self._embedding_provider.get_provider_name(),
            ) from exc

        try:
            matches = await self._vector_store.query(vector, top_k=k, include_metadata=True)
        except RetrievalError:
            raise
        except Exception as exc:
            raise RetrievalError(
                message=f"Similarity query failed: {exc}",
                provider_name=self._vector_store.get_provider_name(),
            ) from exc

        logger.info(
            "context_retrieved",
            top_k=k,
            matches=len(matches),
            top_score=matches[0].score if matches else None,
        )
        return matches

    async def build_prompt(
        self,
        query: str,
        history: Sequence[ConversationTurn],
        mode: PromptMode,
        top_k: int | None = None,
    ) -> str:
        """Retrieve context for *query* and render the *mode* template."""
        matches = await self.retrieve(query, top_k=top_k)
        prompt = render_prompt(mode, build_context(matches), query, history)
        logger.debug(
            "prompt_built",
            mode=mode.value,
            history_turns=len(history),
            prompt_chars=len(prompt),
        )
        return prompt
