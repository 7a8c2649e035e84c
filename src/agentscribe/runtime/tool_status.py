"""Tool-call status tracking. Sync, unit-testable."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from agentscribe.messages import (
    AssistantMessage,
    CanonicalMessage,
    ToolResultBlock,
    ToolUseBlock,
    UserToolResultMessage,
)

if TYPE_CHECKING:
    from agentscribe.core.protocols import ToolStatusListener

logger = logging.getLogger(__name__)


class ToolStatus(str, Enum):
    """Completion state of a tool invocation."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class ToolStatusTracker:
    """
    Correlates tool-use blocks with their results.

    Used by ConversationSession to:
    - Mark tool uses pending when first seen
    - Resolve them to success/error when a matching result arrives
    - Notify the rendering layer of every status change

    Messages must be observed in the order they were delivered. A result
    always supersedes the current state, and a result for an id that was
    never seen pending is recorded as-is. One tracker per conversation.
    """

    def __init__(self, conversation_id: str = ""):
        self._conversation_id = conversation_id
        self._statuses: dict[str, ToolStatus] = {}
        self._listeners: list[ToolStatusListener] = []
        self._notifying = False

    def get_status(self, tool_use_id: str) -> Optional[ToolStatus]:
        """Current status, or None if the id has never been observed."""
        return self._statuses.get(tool_use_id)

    def __contains__(self, tool_use_id: object) -> bool:
        return tool_use_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    def snapshot(self) -> dict[str, ToolStatus]:
        """Get all statuses (copy)."""
        return dict(self._statuses)

    def pending_ids(self) -> list[str]:
        """Tool-use ids still pending, in first-seen order."""
        return [
            tool_use_id
            for tool_use_id, status in self._statuses.items()
            if status is ToolStatus.PENDING
        ]

    def subscribe(self, listener: ToolStatusListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that removes the listener. Safe to call more than once.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def mark_pending(self, tool_use_id: str) -> bool:
        """
        Record a tool use as pending unless it is already known.

        Returns:
            True if the id was new
        """
        if tool_use_id in self._statuses:
            return False
        self._set(tool_use_id, ToolStatus.PENDING)
        return True

    def record_result(self, tool_use_id: str, is_error: bool) -> ToolStatus:
        """Resolve a tool use from its result, overriding any prior state."""
        status = ToolStatus.ERROR if is_error else ToolStatus.SUCCESS
        self._set(tool_use_id, status)
        return status

    def observe(self, message: CanonicalMessage) -> None:
        """Apply one canonical message's tool-use and tool-result blocks."""
        if isinstance(message, AssistantMessage):
            for block in message.content:
                if isinstance(block, ToolUseBlock) and block.id:
                    self.mark_pending(block.id)
        elif isinstance(message, UserToolResultMessage):
            for result in message.content:
                if isinstance(result, ToolResultBlock) and result.tool_use_id:
                    self.record_result(result.tool_use_id, result.is_error)

    def observe_all(self, messages: Iterable[CanonicalMessage]) -> None:
        """Apply messages in order."""
        for message in messages:
            self.observe(message)

    def _set(self, tool_use_id: str, status: ToolStatus) -> None:
        if self._notifying:
            raise RuntimeError(
                f"Tool status for {tool_use_id} changed from inside a status listener"
            )
        if self._statuses.get(tool_use_id) is status:
            return

        self._statuses[tool_use_id] = status
        logger.debug(
            f"Conversation {self._conversation_id}: tool {tool_use_id} -> {status.value}"
        )
        self._notify(tool_use_id, status)

    def _notify(self, tool_use_id: str, status: ToolStatus) -> None:
        self._notifying = True
        try:
            for listener in list(self._listeners):
                try:
                    listener(tool_use_id, status)
                except Exception as e:
                    logger.error(
                        f"Tool status listener failed for {tool_use_id}: {e}",
                        exc_info=True,
                    )
        finally:
            self._notifying = False
