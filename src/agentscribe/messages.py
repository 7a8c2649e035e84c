"""
Canonical message schema shared by replayed history and the live stream.

Messages are strongly typed using discriminated unions on ``type``, so a
payload arriving from the agent process can be validated once and then
narrowed with pattern matching:

    match message:
        case AssistantMessage(content=blocks):
            ...
        case UserToolResultMessage(content=results):
            ...
"""

from __future__ import annotations

import uuid
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def new_message_id() -> str:
    """Mint a fresh, globally unique message/tool identifier."""
    return str(uuid.uuid4())


class TextBlock(BaseModel):
    """Plain text content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel):
    """A tool invocation requested by the assistant."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel):
    """Outcome of a tool invocation, keyed by the originating tool-use id."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: list[TextBlock] = Field(default_factory=list, validate_default=True)
    is_error: bool = False

    @field_validator("content", mode="before")
    @classmethod
    def _wrap_plain_text(cls, value: Any) -> Any:
        # Live payloads may carry the result as a bare string
        if value is None:
            return []
        if isinstance(value, str):
            return [{"type": "text", "text": value}]
        return value

    @field_validator("content")
    @classmethod
    def _never_empty(cls, value: list[TextBlock]) -> list[TextBlock]:
        return value or [TextBlock(text="")]


ContentBlock = Annotated[Union[TextBlock, ToolUseBlock], Field(discriminator="type")]


class UserPromptMessage(BaseModel):
    """A prompt typed by the user."""

    model_config = ConfigDict(frozen=True)

    type: Literal["user_prompt"] = "user_prompt"
    uuid: str
    prompt: str


class UserToolResultMessage(BaseModel):
    """Tool results handed back to the agent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["user"] = "user"
    uuid: str
    conversation_id: str = Field(
        validation_alias=AliasChoices("conversation_id", "conversationId", "session_id")
    )
    content: list[ToolResultBlock]


class AssistantMessage(BaseModel):
    """Assistant output: text blocks and/or tool-use requests."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["assistant"] = "assistant"
    uuid: str
    conversation_id: str = Field(
        validation_alias=AliasChoices("conversation_id", "conversationId", "session_id")
    )
    content: list[ContentBlock]
    model: Optional[str] = None
    transcript: Optional[list[TextBlock]] = None

    @field_validator("model")
    @classmethod
    def _blank_model_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        """Tool-use blocks in content order."""
        return [block for block in self.content if isinstance(block, ToolUseBlock)]


# Union type for all canonical messages
CanonicalMessage = Annotated[
    Union[UserPromptMessage, UserToolResultMessage, AssistantMessage],
    Field(discriminator="type"),
]

_canonical_adapter: TypeAdapter[CanonicalMessage] = TypeAdapter(CanonicalMessage)


def parse_stream_message(payload: dict[str, Any]) -> CanonicalMessage:
    """
    Validate a live-stream payload into a canonical message.

    Args:
        payload: JSON-like dict as emitted by the running agent process.

    Returns:
        The matching canonical message model.

    Raises:
        pydantic.ValidationError: If the payload does not match any message type.
    """
    return _canonical_adapter.validate_python(payload)
