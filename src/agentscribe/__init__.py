"""
agentscribe - Canonical transcripts for coding-agent activity.

History Layer:
    adapt_history_entries: Raw persisted history -> canonical messages
    HistoryAdapter: Same, behind the HistoryConverter protocol
    ConversationStore: Read-only access to the agent's conversation database

Runtime Layer:
    ConversationSession: Per-conversation message sequence + tool status
    ToolStatusTracker: Tool-use id -> pending/success/error, with listeners

Messages:
    UserPromptMessage, UserToolResultMessage, AssistantMessage
    TextBlock, ToolUseBlock, ToolResultBlock

Example:
    from agentscribe import ConversationSession, ConversationStore
    from agentscribe.config import load_assistant_settings, resolve_data_path

    settings = load_assistant_settings()
    session = ConversationSession("conv-1", fallback_model=settings.default_model)

    data_path = resolve_data_path(settings)
    if data_path:
        with ConversationStore(data_path) as store:
            session.load_history(store, key="/path/to/workspace")

    unsubscribe = session.tool_status.subscribe(
        lambda tool_use_id, status: print(tool_use_id, status.value)
    )
    session.append(live_payload)
"""

from .history import ConversationRecord, ConversationStore, HistoryAdapter, adapt_history_entries
from .messages import (
    AssistantMessage,
    CanonicalMessage,
    ContentBlock,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserPromptMessage,
    UserToolResultMessage,
    parse_stream_message,
)
from .runtime import ConversationSession, ToolStatus, ToolStatusTracker

__all__ = [
    # History
    "adapt_history_entries",
    "HistoryAdapter",
    "ConversationStore",
    "ConversationRecord",
    # Runtime
    "ConversationSession",
    "ToolStatus",
    "ToolStatusTracker",
    # Messages
    "CanonicalMessage",
    "UserPromptMessage",
    "UserToolResultMessage",
    "AssistantMessage",
    "ContentBlock",
    "TextBlock",
    "ToolUseBlock",
    "ToolResultBlock",
    "parse_stream_message",
]

__version__ = "0.0.1"
