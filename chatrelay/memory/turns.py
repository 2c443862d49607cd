"""Conversation turn types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One message in a conversation, tagged with its speaker role."""

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> Turn:
        return cls(Role.ASSISTANT, content)

    def to_message(self) -> dict[str, str]:
        """Return the turn in OpenAI message format."""
        return {"role": self.role.value, "content": self.content}
