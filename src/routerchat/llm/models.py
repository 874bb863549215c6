from pydantic import BaseModel, ConfigDict, Field

from ..conversation import Message


class WireMessage(BaseModel):
    """A chat message as it appears in request and response bodies."""

    role: str = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")


class ChatCompletionRequest(BaseModel):
    """Outbound request body."""

    model: str = Field(description="Model identifier")
    messages: list[WireMessage] = Field(description="Conversation history, oldest first")


class ChatChoice(BaseModel):
    """A single choice from the response."""

    index: int | None = None
    message: WireMessage
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    """Successful response body. Only the first choice is consumed."""

    id: str
    object: str
    created: int
    choices: list[ChatChoice]

    def first_content(self) -> str | None:
        """Content of the first choice, or None when there are no choices."""
        if not self.choices:
            return None
        return self.choices[0].message.content


class DispatchRequest(BaseModel):
    """Input to exactly one dispatch execution."""

    model_config = ConfigDict(frozen=True)

    conversation_snapshot: tuple[Message, ...] = Field(description="Copy of the transcript")
    model_id: str = Field(description="Model identifier to request")

    def to_payload(self) -> ChatCompletionRequest:
        return ChatCompletionRequest(
            model=self.model_id,
            messages=[WireMessage(**msg.to_wire()) for msg in self.conversation_snapshot],
        )
