"""Dotted key path resolution over a normalized value store."""

from __future__ import annotations

from typing import Any

from typedconf.errors import (
    InvalidKeyError,
    KeyNotFoundError,
    PathIndexError,
    UnsupportedPathError,
)
from typedconf.nodes import GenericMap, NodeKind, node_kind

__all__ = ["normalize_key", "resolve_path", "assign_path"]

_SEPARATOR = "."


def normalize_key(key: str) -> str:
    """Trim whitespace, then leading and trailing separators."""
    return key.strip().strip(_SEPARATOR)


def _parse_index(key: str, segment: str, length: int) -> int:
    # ASCII digits only: no sign, no whitespace
    if not (segment.isascii() and segment.isdigit()):
        raise PathIndexError(key=key, segment=segment, length=length)
    index = int(segment)
    if index >= length:
        raise PathIndexError(key=key, segment=segment, length=length)
    return index


def _step(node: Any, key: str, segment: str) -> Any:
    """Descend one segment from ``node``."""
    kind = node_kind(node)
    if kind is NodeKind.STRING_MAP:
        if segment not in node:
            raise KeyNotFoundError(key=key, segment=segment)
        return node[segment]
    if kind is NodeKind.GENERIC_MAP:
        found, child = node.lookup(segment)
        if not found:
            raise KeyNotFoundError(key=key, segment=segment)
        return child
    if kind is NodeKind.SEQUENCE:
        return node[_parse_index(key, segment, len(node))]
    raise UnsupportedPathError(key=key, segment=segment, node_type=type(node).__name__)


def resolve_path(data: dict[str, Any], key: str, find_by_path: bool = True) -> Any:
    """Return the raw value at ``key``.

    The key is normalized first. A verbatim top-level hit wins, so keys that
    themselves contain dots stay addressable. Otherwise the key is split on
    dots and walked one segment at a time.

    Raises:
        InvalidKeyError: If the key is empty after normalization.
        KeyNotFoundError: If a segment names a missing map key.
        PathIndexError: If a sequence segment is not an in-range index.
        UnsupportedPathError: If a segment descends into a scalar.
    """
    path = normalize_key(key)
    if not path:
        raise InvalidKeyError(key=key)

    if path in data:
        return data[path]

    if not find_by_path or _SEPARATOR not in path:
        raise KeyNotFoundError(key=path)

    top, *rest = path.split(_SEPARATOR)
    if top not in data:
        raise KeyNotFoundError(key=path, segment=top)

    node = data[top]
    for segment in rest:
        node = _step(node, path, segment)
    return node


def _map_key(node: dict[Any, Any], segment: str) -> Any:
    """Return the existing key a segment addresses, or the segment itself."""
    if isinstance(node, GenericMap):
        found, key = node.match_key(segment)
        if found:
            return key
    return segment


def assign_path(data: dict[str, Any], key: str, value: Any, set_by_path: bool = True) -> None:
    """Store ``value`` (already normalized) at ``key``.

    Missing intermediate maps are created as string-keyed dicts. Sequences
    are only written at existing indexes.
    """
    path = normalize_key(key)
    if not path:
        raise InvalidKeyError(key=key)

    if not set_by_path or _SEPARATOR not in path:
        data[path] = value
        return

    *parents, leaf = path.split(_SEPARATOR)
    node: Any = data
    for segment in parents:
        kind = node_kind(node)
        if kind in (NodeKind.STRING_MAP, NodeKind.GENERIC_MAP):
            map_key = _map_key(node, segment)
            child = node.get(map_key)
            if node_kind(child) not in (NodeKind.STRING_MAP, NodeKind.GENERIC_MAP, NodeKind.SEQUENCE):
                child = {}
                node[map_key] = child
            node = child
        elif kind is NodeKind.SEQUENCE:
            node = node[_parse_index(path, segment, len(node))]
        else:
            raise UnsupportedPathError(key=path, segment=segment, node_type=type(node).__name__)

    kind = node_kind(node)
    if kind is NodeKind.SEQUENCE:
        node[_parse_index(path, leaf, len(node))] = value
    elif kind in (NodeKind.STRING_MAP, NodeKind.GENERIC_MAP):
        node[_map_key(node, leaf)] = value
    else:
        raise UnsupportedPathError(key=path, segment=leaf, node_type=type(node).__name__)
