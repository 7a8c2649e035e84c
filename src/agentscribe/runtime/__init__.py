"""Runtime layer: per-conversation sessions and tool-status correlation."""

from .session import ConversationSession
from .tool_status import ToolStatus, ToolStatusTracker

__all__ = ["ConversationSession", "ToolStatus", "ToolStatusTracker"]
