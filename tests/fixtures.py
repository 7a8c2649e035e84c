"""Raw history factories for unit tests.

This module provides factory functions that build history entries in the
shapes the agent persists, plus a helper that writes them into a
conversations_v2 SQLite table.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class HistoryEntryFactory:
    """Factory for raw history entries."""

    @staticmethod
    def prompt(prompt: Any, message_id: Optional[str] = None, **metadata: Any) -> Dict[str, Any]:
        """Entry holding a user prompt (nested under user.content)."""
        if message_id is not None:
            metadata["message_id"] = message_id
        return {
            "user": {"content": {"Prompt": {"prompt": prompt}}},
            "request_metadata": metadata,
        }

    @staticmethod
    def tool_use(
        *tool_uses: Dict[str, Any], message_id: Optional[str] = None, **metadata: Any
    ) -> Dict[str, Any]:
        """Entry holding assistant tool uses."""
        envelope: Dict[str, Any] = {"tool_uses": list(tool_uses)}
        if message_id is not None:
            envelope["message_id"] = message_id
        return {"assistant": {"ToolUse": envelope}, "request_metadata": metadata}

    @staticmethod
    def tool_results(*results: Dict[str, Any], **metadata: Any) -> Dict[str, Any]:
        """Entry holding tool results."""
        return {
            "user": {"content": {"ToolUseResults": {"tool_use_results": list(results)}}},
            "request_metadata": metadata,
        }

    @staticmethod
    def response(
        content: Any, message_id: Optional[str] = None, **metadata: Any
    ) -> Dict[str, Any]:
        """Entry holding an assistant response."""
        envelope: Dict[str, Any] = {"content": content}
        if message_id is not None:
            envelope["message_id"] = message_id
        return {"assistant": {"Response": envelope}, "request_metadata": metadata}


factory = HistoryEntryFactory()


def create_conversation_db(path: Path, rows: List[Tuple[str, str, Any, int]]) -> Path:
    """Create a conversations_v2 table holding (key, conversation_id, value, updated_at) rows."""
    conn = sqlite3.connect(str(path))
    try:
        conn.execute(
            "create table conversations_v2 ("
            "key text primary key, conversation_id text, value text, updated_at integer)"
        )
        conn.executemany("insert into conversations_v2 values (?, ?, ?, ?)", rows)
        conn.commit()
    finally:
        conn.close()
    return path


def conversation_row(
    key: str, conversation_id: str, history: List[Dict[str, Any]], updated_at: int
) -> Tuple[str, str, str, int]:
    """Row whose value is a JSON document with the given history."""
    return (key, conversation_id, json.dumps({"history": history}), updated_at)
