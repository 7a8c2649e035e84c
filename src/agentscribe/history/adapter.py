"""
History adapter - converts raw persisted history into canonical messages.

Each raw entry contributes, in this order and only when the facet is
present:

1. UserPromptMessage       (user.Prompt with a non-blank prompt)
2. UserToolResultMessage   (user.ToolUseResults with at least one result)
3. AssistantMessage        (assistant.ToolUse with at least one tool use)
4. AssistantMessage        (assistant.Response with non-empty content)

Malformed facets contribute nothing. The adapter never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from agentscribe.core.protocols import HistoryConverter
from agentscribe.messages import (
    AssistantMessage,
    CanonicalMessage,
    ToolResultBlock,
    ToolUseBlock,
    UserPromptMessage,
    UserToolResultMessage,
    new_message_id,
)

from .entries import (
    HistoryEntry,
    ResponseFacet,
    ToolResultsFacet,
    ToolUseFacet,
    decode_entry,
)
from .normalize import (
    is_empty_value,
    normalize_text_blocks,
    pick_model_string,
    read_message_id,
    resolve_model,
)

logger = logging.getLogger(__name__)


def _coerce_id(candidate: Optional[str]) -> str:
    """Reuse a non-blank source identifier verbatim, else mint one."""
    if candidate and candidate.strip():
        return candidate
    return new_message_id()


def adapt_history_entries(
    entries: list[Any],
    conversation_id: str,
    fallback_model: Optional[str] = None,
) -> list[CanonicalMessage]:
    """
    Convert raw history entries into canonical messages.

    Args:
        entries: Raw entries from the conversation store, oldest first.
        conversation_id: Conversation the messages belong to.
        fallback_model: Model name used when entry metadata names none.

    Returns:
        Canonical messages in entry order (possibly empty).

    Example:
        >>> messages = adapt_history_entries(
        ...     [{"user": {"content": {"Prompt": {"prompt": "hi"}}}}], "conv-1"
        ... )
        >>> [m.type for m in messages]
        ['user_prompt']
    """
    messages: list[CanonicalMessage] = []
    fallback = pick_model_string(fallback_model)

    if not isinstance(entries, list):
        logger.debug(f"Conversation {conversation_id}: history is not a list, skipping")
        return messages

    for raw in entries:
        entry = decode_entry(raw)
        messages.extend(_adapt_entry(entry, conversation_id, fallback))

    logger.debug(
        f"Conversation {conversation_id}: adapted {len(entries)} entries "
        f"into {len(messages)} messages"
    )
    return messages


def _adapt_entry(
    entry: HistoryEntry, conversation_id: str, fallback: Optional[str]
) -> list[CanonicalMessage]:
    out: list[CanonicalMessage] = []
    message_id = read_message_id(entry.metadata)
    model = resolve_model(entry.metadata, fallback)

    if entry.prompt and entry.prompt.prompt.strip():
        out.append(
            UserPromptMessage(uuid=_coerce_id(message_id), prompt=entry.prompt.prompt)
        )

    if entry.tool_results and entry.tool_results.results:
        out.append(_tool_result_message(entry.tool_results, conversation_id, message_id))

    if entry.tool_use and entry.tool_use.tool_uses:
        out.append(_tool_use_message(entry.tool_use, conversation_id, model))

    if entry.response and not is_empty_value(entry.response.content):
        out.append(_response_message(entry.response, conversation_id, model))

    return out


def _tool_result_message(
    facet: ToolResultsFacet, conversation_id: str, message_id: Optional[str]
) -> UserToolResultMessage:
    return UserToolResultMessage(
        uuid=_coerce_id(message_id),
        conversation_id=conversation_id,
        content=[
            ToolResultBlock(
                tool_use_id=result.tool_use_id
                if result.tool_use_id is not None
                else new_message_id(),
                content=normalize_text_blocks(result.content),
                is_error=result.is_error,
            )
            for result in facet.results
        ],
    )


def _tool_use_message(
    facet: ToolUseFacet, conversation_id: str, model: Optional[str]
) -> AssistantMessage:
    return AssistantMessage(
        uuid=_coerce_id(facet.message_id),
        conversation_id=conversation_id,
        content=[
            ToolUseBlock(
                id=record.id if record.id is not None else new_message_id(),
                name=record.resolved_name,
                input=record.resolved_args,
            )
            for record in facet.tool_uses
        ],
        model=model,
    )


def _response_message(
    facet: ResponseFacet, conversation_id: str, model: Optional[str]
) -> AssistantMessage:
    transcript = normalize_text_blocks(facet.content)
    return AssistantMessage(
        uuid=_coerce_id(facet.message_id),
        conversation_id=conversation_id,
        content=list(transcript),
        model=model,
        transcript=transcript,
    )


class HistoryAdapter(HistoryConverter[list[CanonicalMessage]]):
    """
    Converts raw conversation history to canonical messages.

    Args:
        conversation_id: Conversation the history belongs to
        fallback_model: Default model from user settings, used when entry
            metadata names no model
    """

    def __init__(self, conversation_id: str, fallback_model: Optional[str] = None):
        self.conversation_id = conversation_id
        self.fallback_model = fallback_model

    def convert(self, raw: list[Any]) -> list[CanonicalMessage]:
        """Convert raw history entries to canonical messages."""
        return adapt_history_entries(raw, self.conversation_id, self.fallback_model)
