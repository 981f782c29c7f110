"""Conversation history stores."""

from lexassist.providers.conversation.memory_store import InMemoryConversationStore
from lexassist.providers.conversation.sqlite_store import SQLiteConversationStore

__all__ = ["InMemoryConversationStore", "SQLiteConversationStore"]
