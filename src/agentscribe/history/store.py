"""
Read-only access to the agent's persisted conversations.

The agent keeps conversations in a SQLite database, one row per
conversation in ``conversations_v2``:

    key              TEXT   -- workspace/session key
    conversation_id  TEXT
    value            TEXT   -- JSON document with a "history" list
    updated_at       INTEGER

The database is only ever opened read-only. Query and connection failures
are treated as "no history"; rows whose JSON cannot be parsed are skipped.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = "select key, conversation_id, value, updated_at from conversations_v2"


def _decode_text(value: bytes) -> str:
    return value.decode("utf-8", errors="replace")


@dataclass
class ConversationRecord:
    """A persisted conversation with its raw history entries."""

    key: str
    conversation_id: str
    history: list[dict[str, Any]]
    raw: dict[str, Any] = field(default_factory=dict)
    updated_at: Optional[int] = None


def parse_conversation_row(row: Optional[sqlite3.Row]) -> Optional[ConversationRecord]:
    """Parse one ``conversations_v2`` row. Returns None if the payload is unusable."""
    if row is None:
        return None
    try:
        parsed = json.loads(row["value"])
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to parse conversation payload for {row['key']}: {e}")
        return None

    if not isinstance(parsed, dict):
        logger.warning(f"Conversation payload for {row['key']} is not an object")
        return None

    history = parsed.get("history")
    return ConversationRecord(
        key=row["key"],
        conversation_id=row["conversation_id"],
        history=history if isinstance(history, list) else [],
        raw=parsed,
        updated_at=row["updated_at"],
    )


class ConversationStore:
    """
    SQLite-backed conversation source.

    The connection is opened lazily on first use and reused. Use as a
    context manager, or call close() when done.

    Args:
        database_path: Path to the agent's data.sqlite3
    """

    def __init__(self, database_path: Union[str, Path]):
        self.database_path = Path(database_path)
        self.conn: Optional[sqlite3.Connection] = None

    def __enter__(self) -> ConversationStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _connect(self) -> sqlite3.Connection:
        """Open the database read-only. Raises sqlite3.Error if it does not exist."""
        if self.conn is None:
            uri = f"{self.database_path.resolve().as_uri()}?mode=ro"
            self.conn = sqlite3.connect(uri, uri=True)
            self.conn.row_factory = sqlite3.Row
            # Undecodable TEXT must not fail the whole query; the row is skipped later
            self.conn.text_factory = _decode_text
            logger.debug(f"Opened conversation store at {self.database_path}")
        return self.conn

    def load(self, key: str) -> Optional[ConversationRecord]:
        """Load one conversation by key. Returns None if missing or unreadable."""
        try:
            row = self._connect().execute(f"{_SELECT_COLUMNS} where key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Failed to load conversation {key}: {e}")
            return None
        return parse_conversation_row(row)

    def list_recent(self, limit: int = 20) -> list[ConversationRecord]:
        """Most recently updated conversations, newest first. Unparseable rows are skipped."""
        try:
            rows = (
                self._connect()
                .execute(f"{_SELECT_COLUMNS} order by updated_at desc limit ?", (limit,))
                .fetchall()
            )
        except sqlite3.Error as e:
            logger.warning(f"Failed to list conversations: {e}")
            return []

        records = [parse_conversation_row(row) for row in rows]
        return [record for record in records if record is not None]

    def close(self) -> None:
        """Close the connection if open."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
