"""
ConversationSession - per-conversation message sequence and tool status.

A session owns the append-only canonical message list for one conversation
and the ToolStatusTracker derived from it. Replayed history and live
messages flow through the same append path, so the tracker sees one
ordered timeline.

Abnormal termination:
    If the agent process dies mid-call, its tool uses stay pending forever.
    abort() closes them out by appending a synthetic tool-result message
    that marks each pending tool use as an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import ValidationError

from agentscribe.history.adapter import adapt_history_entries
from agentscribe.messages import (
    CanonicalMessage,
    TextBlock,
    ToolResultBlock,
    UserToolResultMessage,
    new_message_id,
    parse_stream_message,
)

from .tool_status import ToolStatusTracker

if TYPE_CHECKING:
    from agentscribe.core.protocols import ConversationSource

logger = logging.getLogger(__name__)


class ConversationSession:
    """
    Message sequence and tool-status table for one conversation.

    Args:
        conversation_id: Conversation this session renders
        fallback_model: Default model from user settings, applied to
            replayed assistant messages whose metadata names none
    """

    def __init__(self, conversation_id: str, fallback_model: Optional[str] = None):
        self.conversation_id = conversation_id
        self.fallback_model = fallback_model
        self._messages: list[CanonicalMessage] = []
        self._tool_status = ToolStatusTracker(conversation_id)

    @property
    def messages(self) -> list[CanonicalMessage]:
        """Get messages so far (copy)."""
        return self._messages.copy()

    @property
    def tool_status(self) -> ToolStatusTracker:
        """Tool-status table for this conversation."""
        return self._tool_status

    def hydrate(self, entries: list[Any]) -> list[CanonicalMessage]:
        """
        Adapt raw history entries and append the results.

        Returns:
            The messages appended
        """
        adapted = adapt_history_entries(entries, self.conversation_id, self.fallback_model)
        for message in adapted:
            self._append(message)
        logger.debug(
            f"Session {self.conversation_id}: hydrated {len(adapted)} messages from history"
        )
        return adapted

    def load_history(self, source: ConversationSource, key: str) -> list[CanonicalMessage]:
        """
        Load and hydrate persisted history for this conversation.

        A missing or unreadable conversation hydrates nothing.
        """
        record = source.load(key)
        if record is None:
            logger.debug(f"Session {self.conversation_id}: no stored history for {key}")
            return []
        return self.hydrate(record.history)

    def append(
        self, message: Union[CanonicalMessage, dict[str, Any]]
    ) -> Optional[CanonicalMessage]:
        """
        Append one live message.

        Args:
            message: Canonical message, or a raw payload from the live stream

        Returns:
            The appended message, or None if the payload was invalid
        """
        if isinstance(message, dict):
            try:
                message = parse_stream_message(message)
            except ValidationError as e:
                logger.warning(
                    f"Session {self.conversation_id}: dropping invalid stream message: {e}"
                )
                return None
        self._append(message)
        return message

    def abort(self, reason: str = "Agent process exited") -> Optional[UserToolResultMessage]:
        """
        Resolve every pending tool use as an error.

        Returns:
            The synthetic tool-result message, or None if nothing was pending
        """
        pending = self._tool_status.pending_ids()
        if not pending:
            return None

        message = UserToolResultMessage(
            uuid=new_message_id(),
            conversation_id=self.conversation_id,
            content=[
                ToolResultBlock(
                    tool_use_id=tool_use_id,
                    content=[TextBlock(text=reason)],
                    is_error=True,
                )
                for tool_use_id in pending
            ],
        )
        logger.warning(
            f"Session {self.conversation_id}: marking {len(pending)} pending tool calls "
            f"as failed ({reason})"
        )
        self._append(message)
        return message

    def _append(self, message: CanonicalMessage) -> None:
        self._messages.append(message)
        self._tool_status.observe(message)
