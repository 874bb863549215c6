"""Data models for the conversation transcript.

These models define the structure of a chat message independent of how
it is rendered or sent over the wire.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single immutable message in the conversation.

    `created_at` is for display only; ordering comes from the transcript.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender")
    content: str = Field(description="Text of the message")
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)

    def to_wire(self) -> dict[str, str]:
        """Convert to the `{role, content}` shape the endpoint expects."""
        return {"role": self.role.value, "content": self.content}
