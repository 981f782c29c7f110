"""Abstract base class for per-session conversation history.

History is keyed by an opaque session id that the caller supplies (a
cookie value, a CLI flag, a client-generated uuid).  The store never
decides when a session starts or ends; expiry belongs to whoever owns the
session id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lexassist.models.conversation import ConversationTurn


# Concrete implementations: InMemoryConversationStore, SQLiteConversationStore
# Located in: lexassist/providers/conversation/
class IConversationStore(ABC):
    """Contract for ordered, append-only chat history per session."""

    @abstractmethod
    def get(self, session_id: str) -> list[ConversationTurn]:
        """Return the session's turns in chronological order ([] if unknown)."""

    @abstractmethod
    def append(self, session_id: str, *turns: ConversationTurn) -> None:
        """Append *turns* to the end of the session's history, in order."""

    @abstractmethod
    def clear(self, session_id: str) -> None:
        """Drop all turns for the session.  Unknown sessions are a no-op."""

    @abstractmethod
    def session_count(self) -> int:
        """Return the number of sessions with at least one turn."""
