"""
Truncation engine — bounds rendered output while reporting what was cut.

Two algorithms:
  truncate_bytes      linear prefix cut of raw bytes
  truncate_structure  per-node cut of decoded JSON values

truncate_json chains them: structural truncation bounds node sizes but not
node count, so the serialized result gets a final byte ceiling.
"""

from __future__ import annotations

import json
from typing import Any

from netledger.network.models import TruncationLimits


def annotation(original_length: int, unit: str = "") -> str:
    suffix = f" {unit}" if unit else ""
    return f"... (truncated, original length: {original_length}{suffix})"


def truncate_bytes(data: bytes, max_bytes: int, encoding: str = "utf-8") -> str:
    """
    Decode at most max_bytes of data.

    A cut may split a multi-byte character; the broken tail is replaced,
    and the appended annotation makes the cut explicit.
    """
    if len(data) <= max_bytes:
        return data.decode(encoding, errors="replace")
    prefix = data[:max_bytes].decode(encoding, errors="replace")
    return f"{prefix}\n{annotation(len(data), 'bytes')}"


def truncate_structure(value: Any, max_array_length: int, max_string_length: int) -> Any:
    """
    Return a truncated copy of value. Mapping keys are always kept.

    Walks with an explicit stack, so nesting depth is bounded only by memory.
    """
    root: list[Any] = [None]
    stack: list[tuple[Any, Any, Any]] = [(value, root, 0)]
    while stack:
        node, parent, slot = stack.pop()
        if isinstance(node, str):
            if len(node) > max_string_length:
                node = node[:max_string_length] + annotation(len(node))
            parent[slot] = node
        elif isinstance(node, (list, tuple)):
            kept = node[:max_array_length]
            items: list[Any] = [None] * len(kept)
            if len(node) > max_array_length:
                items.append(annotation(len(node)))
            parent[slot] = items
            stack.extend((item, items, i) for i, item in enumerate(kept))
        elif isinstance(node, dict):
            mapping = dict.fromkeys(node)
            parent[slot] = mapping
            stack.extend((item, mapping, key) for key, item in node.items())
        else:
            parent[slot] = node
    return root[0]


def first_line(error: BaseException) -> str:
    """First line of an error message, for single-line caller reports."""
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


def serialize(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def truncate_json(value: Any, limits: TruncationLimits) -> tuple[Any, str, bool]:
    """
    Structurally truncate value, serialize it, then apply the byte ceiling.

    Returns (truncated value, output text, cut). The text is valid JSON
    unless cut is True, i.e. the serialized form exceeded
    limits.json_max_bytes.

    Raises RecursionError when the truncated value is nested too deeply
    for json.dumps.
    """
    truncated = truncate_structure(value, limits.json_max_array_length, limits.json_max_string_length)
    encoded = serialize(truncated).encode("utf-8")
    cut = len(encoded) > limits.json_max_bytes
    return truncated, truncate_bytes(encoded, limits.json_max_bytes), cut
