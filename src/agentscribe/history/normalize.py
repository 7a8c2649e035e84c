"""Text-block normalization and metadata lookups for raw history payloads."""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, Optional

from agentscribe.messages import TextBlock

MODEL_KEYS = (
    "model",
    "model_id",
    "selected_model",
    "selectedModel",
    "modelName",
    "default_model",
)
NESTED_MODEL_CONTAINERS = ("default_params", "request", "options", "config")
NESTED_MODEL_KEYS = ("model", "model_id", "selected_model")


def _pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def is_empty_value(item: Any) -> bool:
    """None, "", False, 0 and NaN count as empty. Empty dicts and lists do not."""
    if item is None or item is False:
        return True
    if isinstance(item, str):
        return item == ""
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return item == 0 or (isinstance(item, float) and math.isnan(item))
    return False


def _flatten_item(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        if isinstance(item.get("Text"), str):
            return item["Text"]
        if isinstance(item.get("text"), str):
            return item["text"]
    # Nested lists are not recursed into
    return _compact_json(item)


def normalize_text_blocks(value: Any) -> list[TextBlock]:
    """
    Normalize an arbitrary tool-result or response payload into text blocks.

    Always returns at least one block.

    - None -> one empty block
    - str -> one block
    - list -> one block per usable element (strings, ``Text``/``text``
      fields, otherwise compact JSON)
    - dict with ``stdout``/``stderr`` -> labelled output blocks
    - dict with a string ``Text`` -> one block
    - anything else -> indented JSON

    Example:
        >>> [b.text for b in normalize_text_blocks([{"Text": "a"}, "b", {}])]
        ['a', 'b', '{}']
    """
    if value is None:
        return [TextBlock(text="")]

    if isinstance(value, str):
        return [TextBlock(text=value)]

    if isinstance(value, list):
        flattened = [_flatten_item(item) for item in value if not is_empty_value(item)]
        if not flattened:
            return [TextBlock(text="")]
        return [TextBlock(text=text) for text in flattened]

    if isinstance(value, Mapping):
        if "stdout" in value or "stderr" in value:
            stdout = value.get("stdout")
            stderr = value.get("stderr")
            lines: list[str] = []
            if isinstance(stdout, str) and stdout.strip():
                lines.append(f"Stdout:\n{stdout}")
            if isinstance(stderr, str) and stderr.strip():
                lines.append(f"Stderr:\n{stderr}")
            if not lines:
                return [TextBlock(text=_pretty_json(value))]
            return [TextBlock(text=text) for text in lines]

        if isinstance(value.get("Text"), str):
            return [TextBlock(text=value["Text"])]

    return [TextBlock(text=_pretty_json(value))]


def pick_model_string(value: Any) -> Optional[str]:
    """Return the trimmed string, or None if it is not a non-blank string."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def extract_model_from_metadata(metadata: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Find the model name recorded in request metadata, if any."""
    if not metadata:
        return None

    for key in MODEL_KEYS:
        candidate = pick_model_string(metadata.get(key))
        if candidate:
            return candidate

    for container in NESTED_MODEL_CONTAINERS:
        nested = metadata.get(container)
        if not isinstance(nested, Mapping):
            continue
        # First string-typed key wins, even if blank
        first = next(
            (nested[key] for key in NESTED_MODEL_KEYS if isinstance(nested.get(key), str)),
            None,
        )
        candidate = pick_model_string(first)
        if candidate:
            return candidate

    return None


def resolve_model(
    metadata: Optional[Mapping[str, Any]], fallback: Optional[str] = None
) -> Optional[str]:
    """Model from metadata, else the trimmed fallback, else None."""
    return extract_model_from_metadata(metadata) or pick_model_string(fallback)


def read_message_id(metadata: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Per-entry message identifier from request metadata."""
    if not metadata:
        return None
    message_id = metadata.get("message_id")
    return message_id if isinstance(message_id, str) else None
