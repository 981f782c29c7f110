"""Conversation history models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    BOT = "bot"


class ConversationTurn(BaseModel):
    """One message in a session's chat history."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role = Field(description='"user" or "bot".')
    content: str = Field(description="Message text.")

    def render(self) -> str:
        """Return the ``role: content`` line used in chat prompts."""
        return f"{self.role}: {self.content}"
