"""
Decoded shape of a raw history entry.

The agent persists each exchange as a loosely-typed record:

    {
        "user": {"content": {"Prompt": {...}} | {"ToolUseResults": {...}}},
        "assistant": {"ToolUse": {...}} | {"Response": {...}},
        "request_metadata": {...},
    }

Facets are detected once here, at the entry boundary, so the adapter can
work from a tagged structure instead of probing dicts. Anything with the
wrong shape decodes as absent; decoding never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional


def _as_mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass
class ToolUseRecord:
    """One raw tool invocation. ``name``/``orig_name`` and ``args``/``orig_args`` come from different producers."""

    id: Optional[str] = None
    name: Optional[str] = None
    orig_name: Optional[str] = None
    args: Optional[dict[str, Any]] = None
    orig_args: Optional[dict[str, Any]] = None

    @classmethod
    def decode(cls, raw: Any) -> ToolUseRecord:
        data = _as_mapping(raw)
        args = data.get("args")
        orig_args = data.get("orig_args")
        return cls(
            id=_as_str(data.get("id")),
            name=_as_str(data.get("name")),
            orig_name=_as_str(data.get("orig_name")),
            args=dict(args) if isinstance(args, Mapping) else None,
            orig_args=dict(orig_args) if isinstance(orig_args, Mapping) else None,
        )

    @property
    def resolved_name(self) -> str:
        if self.name is not None:
            return self.name
        if self.orig_name is not None:
            return self.orig_name
        return "tool"

    @property
    def resolved_args(self) -> dict[str, Any]:
        if self.args is not None:
            return self.args
        if self.orig_args is not None:
            return self.orig_args
        return {}


@dataclass
class ToolResultRecord:
    """One raw tool result."""

    tool_use_id: Optional[str] = None
    content: Any = None
    status: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    @classmethod
    def decode(cls, raw: Any) -> ToolResultRecord:
        data = _as_mapping(raw)
        return cls(
            tool_use_id=_as_str(data.get("tool_use_id")),
            content=data.get("content"),
            status=_as_str(data.get("status")),
            stdout=_as_str(data.get("stdout")),
            stderr=_as_str(data.get("stderr")),
        )

    @property
    def is_error(self) -> bool:
        return self.status is not None and self.status.lower() == "error"


@dataclass
class PromptFacet:
    """User prompt text."""

    kind: Literal["prompt"] = field(default="prompt", init=False)
    prompt: str


@dataclass
class ToolResultsFacet:
    """Results of tool invocations reported back by the user side."""

    kind: Literal["tool_results"] = field(default="tool_results", init=False)
    results: list[ToolResultRecord]


@dataclass
class ToolUseFacet:
    """Tool invocations requested by the assistant."""

    kind: Literal["tool_use"] = field(default="tool_use", init=False)
    message_id: Optional[str]
    tool_uses: list[ToolUseRecord]


@dataclass
class ResponseFacet:
    """Assistant response payload (string, block list, or arbitrary JSON)."""

    kind: Literal["response"] = field(default="response", init=False)
    message_id: Optional[str]
    content: Any


@dataclass
class HistoryEntry:
    """A raw history entry with its facets decoded."""

    prompt: Optional[PromptFacet] = None
    tool_results: Optional[ToolResultsFacet] = None
    tool_use: Optional[ToolUseFacet] = None
    response: Optional[ResponseFacet] = None
    metadata: dict[str, Any] = field(default_factory=dict)


def _user_facets(entry: Mapping[str, Any]) -> dict[str, Any]:
    """
    User facets live under ``user.content``; older records put them on ``user`` itself.

    Both levels are merged. A facet present at both levels is taken from ``user.content``.
    """
    user = _as_mapping(entry.get("user"))
    nested = user.get("content")
    if isinstance(nested, Mapping):
        return {**user, **nested}
    return user


def _decode_prompt(user: Mapping[str, Any]) -> Optional[PromptFacet]:
    node = user.get("Prompt")
    if not isinstance(node, Mapping):
        return None
    prompt = _as_str(node.get("prompt"))
    return PromptFacet(prompt=prompt) if prompt is not None else None


def _decode_tool_results(user: Mapping[str, Any]) -> Optional[ToolResultsFacet]:
    node = user.get("ToolUseResults")
    if not isinstance(node, Mapping):
        return None
    results = node.get("tool_use_results")
    if not isinstance(results, list):
        return None
    return ToolResultsFacet(results=[ToolResultRecord.decode(item) for item in results])


def _decode_tool_use(assistant: Mapping[str, Any]) -> Optional[ToolUseFacet]:
    node = assistant.get("ToolUse")
    if not isinstance(node, Mapping):
        return None
    tool_uses = node.get("tool_uses")
    return ToolUseFacet(
        message_id=_as_str(node.get("message_id")),
        tool_uses=[ToolUseRecord.decode(item) for item in tool_uses]
        if isinstance(tool_uses, list)
        else [],
    )


def _decode_response(assistant: Mapping[str, Any]) -> Optional[ResponseFacet]:
    node = assistant.get("Response")
    if not isinstance(node, Mapping):
        return None
    return ResponseFacet(
        message_id=_as_str(node.get("message_id")),
        content=node.get("content"),
    )


def decode_entry(raw: Any) -> HistoryEntry:
    """
    Decode one raw history entry.

    Args:
        raw: Entry as loaded from the conversation store. Non-dict values
             decode to an entry with no facets.

    Returns:
        HistoryEntry with whichever facets were present and well-formed.
    """
    entry = _as_mapping(raw)
    user = _user_facets(entry)
    assistant = _as_mapping(entry.get("assistant"))

    return HistoryEntry(
        prompt=_decode_prompt(user),
        tool_results=_decode_tool_results(user),
        tool_use=_decode_tool_use(assistant),
        response=_decode_response(assistant),
        metadata=_as_mapping(entry.get("request_metadata")),
    )
