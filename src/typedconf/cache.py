"""Thread-safe per-kind cache of coerced lookup results."""

from __future__ import annotations

import copy
import threading
from enum import Enum
from typing import Any

__all__ = ["CacheKind", "ResultCache"]


class CacheKind(str, Enum):
    """Accessor result kinds that keep their own cache."""

    STRING = "string"
    STRINGS = "strings"
    INTS = "ints"
    STRING_MAP = "string_map"
    INT_MAP = "int_map"


class ResultCache:
    """Maps key paths to coerced results, one mapping per :class:`CacheKind`.

    Each kind has its own lock and its mapping is created on first store.
    Entries are never evicted and are not invalidated when the store
    changes; call :meth:`clear` after writes that must be visible.
    Containers are copied on the way in and out so callers cannot alter a
    cached entry.
    """

    def __init__(self) -> None:
        self._locks: dict[CacheKind, threading.Lock] = {kind: threading.Lock() for kind in CacheKind}
        self._entries: dict[CacheKind, dict[str, Any]] = {}

    def get(self, kind: CacheKind, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` on a hit, ``(None, False)`` otherwise."""
        with self._locks[kind]:
            entries = self._entries.get(kind)
            if not entries or key not in entries:
                return None, False
            return copy.copy(entries[key]), True

    def put(self, kind: CacheKind, key: str, value: Any) -> None:
        with self._locks[kind]:
            self._entries.setdefault(kind, {})[key] = copy.copy(value)

    def clear(self, kind: CacheKind | None = None) -> None:
        """Drop every entry of ``kind``, or of all kinds when None."""
        kinds = list(CacheKind) if kind is None else [kind]
        for k in kinds:
            with self._locks[k]:
                self._entries.pop(k, None)

    def size(self, kind: CacheKind | None = None) -> int:
        """Number of cached entries for ``kind``, or across all kinds."""
        kinds = list(CacheKind) if kind is None else [kind]
        total = 0
        for k in kinds:
            with self._locks[k]:
                total += len(self._entries.get(k, ()))
        return total
