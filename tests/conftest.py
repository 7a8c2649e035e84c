"""
Pytest fixtures for agentscribe tests.

Provides raw history in the shapes the agent persists, and a SQLite
conversation database built in tmp_path.
"""

import pytest

from tests.fixtures import conversation_row, create_conversation_db, factory


@pytest.fixture
def bash_exchange():
    """Prompt, Bash tool use and its successful result, facets directly on user/assistant."""
    return [
        {"user": {"Prompt": {"prompt": "hi"}}},
        {
            "assistant": {
                "ToolUse": {
                    "tool_uses": [
                        {"id": "t1", "name": "Bash", "args": {"command": "ls"}}
                    ]
                }
            }
        },
        {
            "user": {
                "ToolUseResults": {
                    "tool_use_results": [
                        {"tool_use_id": "t1", "content": "a\nb", "status": "ok"}
                    ]
                }
            }
        },
    ]


@pytest.fixture
def conversation_db(tmp_path):
    """Database with two valid conversations and one corrupt row."""
    rows = [
        conversation_row(
            "/work/alpha",
            "conv-alpha",
            [factory.prompt("first", message_id="m-1")],
            100,
        ),
        conversation_row(
            "/work/beta",
            "conv-beta",
            [
                factory.prompt("second"),
                factory.response("done", model="claude-sonnet"),
            ],
            300,
        ),
        ("/work/broken", "conv-broken", "{not json", 200),
    ]
    return create_conversation_db(tmp_path / "data.sqlite3", rows)
