"""Canonical node shapes for the value store.

Decoders hand over trees in whatever shape they like: JSON and TOML give
string-keyed dicts, YAML may give integer or boolean keys, callers may pass
tuples or read-only mappings. ``normalize`` copies such a tree into the
canonical shape once, when it enters the store, so the resolver only has to
dispatch on :class:`NodeKind`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from typedconf.coercion import to_text

__all__ = ["NodeKind", "GenericMap", "node_kind", "normalize", "to_plain"]


class NodeKind(str, Enum):
    """The closed set of node shapes the resolver understands."""

    SCALAR = "scalar"
    STRING_MAP = "string_map"
    GENERIC_MAP = "generic_map"
    SEQUENCE = "sequence"
    OTHER = "other"


class GenericMap(dict):
    """A mapping with at least one non-string key."""

    def match_key(self, segment: str) -> tuple[bool, Any]:
        """Find the stored key a path segment addresses.

        An exact string key wins; otherwise the first key whose canonical
        text equals the segment is used (``1`` matches ``"1"``).
        """
        if segment in self:
            return True, segment
        for key in self:
            if to_text(key) == segment:
                return True, key
        return False, None

    def lookup(self, segment: str) -> tuple[bool, Any]:
        """Find a value by path segment, matching keys as :meth:`match_key` does."""
        found, key = self.match_key(segment)
        if not found:
            return False, None
        return True, self[key]


def node_kind(node: Any) -> NodeKind:
    """Classify a normalized node."""
    if isinstance(node, GenericMap):
        return NodeKind.GENERIC_MAP
    if isinstance(node, dict):
        return NodeKind.STRING_MAP
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    if node is None or isinstance(node, (str, bool, int, float)):
        return NodeKind.SCALAR
    return NodeKind.OTHER


def normalize(value: Any) -> Any:
    """Return a deep copy of ``value`` in canonical node shape."""
    if isinstance(value, Mapping):
        items = {key: normalize(item) for key, item in value.items()}
        if all(isinstance(key, str) for key in items):
            return items
        return GenericMap(items)
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    return value


def to_plain(node: Any) -> Any:
    """Return a deep copy of a normalized node using only builtin containers."""
    if isinstance(node, dict):
        return {key: to_plain(item) for key, item in node.items()}
    if isinstance(node, list):
        return [to_plain(item) for item in node]
    return node
