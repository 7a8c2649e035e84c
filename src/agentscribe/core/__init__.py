"""Core protocols."""

from .protocols import ConversationSource, HistoryConverter, ToolStatusListener

__all__ = ["HistoryConverter", "ConversationSource", "ToolStatusListener"]
