"""
History reconstruction: raw persisted conversation history to canonical messages.

The main entry point is `adapt_history_entries()`. Raw entries usually come
from a `ConversationStore`:

    from agentscribe.history import ConversationStore, adapt_history_entries

    with ConversationStore(path) as store:
        record = store.load(key)

    messages = adapt_history_entries(record.history, record.conversation_id)
"""

from .adapter import HistoryAdapter, adapt_history_entries
from .entries import (
    HistoryEntry,
    PromptFacet,
    ResponseFacet,
    ToolResultRecord,
    ToolResultsFacet,
    ToolUseFacet,
    ToolUseRecord,
    decode_entry,
)
from .normalize import normalize_text_blocks, resolve_model
from .store import ConversationRecord, ConversationStore

__all__ = [
    "adapt_history_entries",
    "HistoryAdapter",
    "decode_entry",
    "HistoryEntry",
    "PromptFacet",
    "ToolResultsFacet",
    "ToolUseFacet",
    "ResponseFacet",
    "ToolUseRecord",
    "ToolResultRecord",
    "normalize_text_blocks",
    "resolve_model",
    "ConversationStore",
    "ConversationRecord",
]
