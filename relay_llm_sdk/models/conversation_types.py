from pydantic import BaseModel, ConfigDict
from enum import Enum


class MessageRole(str, Enum):
    """Chat message roles understood by the chat-completion backend."""
    SYSTEM = "system"
    DEVELOPER = "developer"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ChatMessage(BaseModel):
    """A single role-tagged message in a conversation."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: MessageRole
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.ASSISTANT, content=content)
