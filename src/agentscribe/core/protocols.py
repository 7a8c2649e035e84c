"""Core protocols for history conversion and tool-status observation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from agentscribe.history.store import ConversationRecord
    from agentscribe.runtime.tool_status import ToolStatus

T = TypeVar("T", covariant=True)


@runtime_checkable
class HistoryConverter(Protocol[T]):
    """
    Converts raw conversation history to another representation.

    The library ships `HistoryAdapter`, which produces canonical messages.
    """

    def convert(self, raw: list[Any]) -> T:
        """
        Convert raw history entries.

        Args:
            raw: Entries as persisted by the agent. Each dict may have:
                 user, assistant, request_metadata

        Returns:
            Converted history
        """
        ...


@runtime_checkable
class ConversationSource(Protocol):
    """
    Read-only source of persisted conversations.

    Implementations: ConversationStore (SQLite). Tests use in-memory fakes.
    """

    def load(self, key: str) -> "ConversationRecord | None":
        """Load one conversation, or None if it is missing or unreadable."""
        ...

    def list_recent(self, limit: int = 20) -> "list[ConversationRecord]":
        """Most recently updated conversations, newest first."""
        ...


@runtime_checkable
class ToolStatusListener(Protocol):
    """Called synchronously after a tool-use status changes."""

    def __call__(self, tool_use_id: str, status: "ToolStatus") -> None: ...
