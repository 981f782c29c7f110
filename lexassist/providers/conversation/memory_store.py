"""Process-local conversation history.

Sessions are independent lists of turns in a dict.  History is lost when
the process exits; use :class:`SQLiteConversationStore` to keep it.
"""

from __future__ import annotations

import threading

from lexassist.interfaces.conversation_store import IConversationStore
from lexassist.models.conversation import ConversationTurn


class InMemoryConversationStore(IConversationStore):
    """Dict of session id -> turns, guarded by one lock."""

    def __init__(self) -> None:
        self._sessions: dict[str, list[ConversationTurn]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> list[ConversationTurn]:
        with self._lock:
            return list(self._sessions.get(session_id, []))

    def append(self, session_id: str, *turns: ConversationTurn) -> None:
        if not turns:
            return
        with self._lock:
            self._sessions.setdefault(session_id, []).extend(turns)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)
