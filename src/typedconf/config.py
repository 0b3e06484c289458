"""Config: a lock-guarded value store with typed, dotted-path accessors."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, NamedTuple, TypeVar

from typedconf.cache import CacheKind, ResultCache
from typedconf.coercion import format_scalar, is_scalar, parse_bool, parse_float, parse_int, to_text
from typedconf.env import expand_env
from typedconf.errors import CoercionError, ConfigError, InvalidKeyError, KeyNotFoundError, ReadOnlyError
from typedconf.nodes import NodeKind, node_kind, normalize, to_plain
from typedconf.options import Options
from typedconf.resolver import assign_path, normalize_key, resolve_path
from typedconf.structure import map_structure
from typedconf.utils.rwlock import ReadWriteLock

__all__ = ["Config", "Lookup"]

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_MAP_KINDS = (NodeKind.STRING_MAP, NodeKind.GENERIC_MAP)


class Lookup(NamedTuple):
    """Result of a typed lookup: the value and whether it was found and converted."""

    value: Any
    ok: bool

    def or_default(self, default: Any) -> Any:
        """Return the value when ok, else ``default``."""
        return self.value if self.ok else default


_MISS = Lookup(None, False)


class Config:
    """Typed accessors over a nested configuration tree.

    Keys are dotted paths (``"db.host"``, ``"servers.0.port"``) walked left
    to right through mappings and sequences. Accessors never raise: they
    return a :class:`Lookup` whose ``ok`` flag is False when the key is
    missing or its value cannot be converted, and record the failure in an
    error log readable via :meth:`errors` and :meth:`drain_errors`.

    Thread safety:
        Lookups and writes are guarded by a reader/writer lock. With
        ``read_only=True`` the lock is skipped entirely and :meth:`set` is
        refused. Cached results are not invalidated by :meth:`set`; call
        :meth:`clear_caches` when a write must become visible to cached
        accessors.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        options: Options | None = None,
        **overrides: Any,
    ) -> None:
        """Create a config over a copy of ``data``.

        Args:
            data: The decoded configuration tree. It is copied into the
                store, so later changes to ``data`` are not seen.
            options: Construction options; defaults to ``Options()``.
            **overrides: Individual option fields, applied on top of
                ``options`` (e.g. ``enable_cache=True``).
        """
        if options is None:
            options = Options(**overrides)
        elif overrides:
            options = Options(**{**options.model_dump(), **overrides})
        self._options: Options = options

        self._data: dict[str, Any] = {}
        for key, value in (data or {}).items():
            self._data[key if isinstance(key, str) else to_text(key)] = normalize(value)

        self._lock: ReadWriteLock | None = None if options.read_only else ReadWriteLock()
        self._cache: ResultCache | None = ResultCache() if options.enable_cache else None
        self._errors: list[ConfigError] = []
        self._errors_lock = threading.Lock()

    @property
    def options(self) -> Options:
        return self._options

    @contextmanager
    def _reading(self) -> Iterator[None]:
        if self._lock is None:
            yield
            return
        with self._lock.read():
            yield

    # -- error log ----------------------------------------------------------

    def _record(self, error: ConfigError) -> None:
        _logger.debug("Config lookup failed: %s", error)
        if isinstance(error, KeyNotFoundError):
            return
        with self._errors_lock:
            self._errors.append(error)

    def errors(self) -> list[ConfigError]:
        """Return a snapshot of the recorded lookup errors, oldest first."""
        with self._errors_lock:
            return list(self._errors)

    def drain_errors(self) -> list[ConfigError]:
        """Return the recorded lookup errors and clear the log."""
        with self._errors_lock:
            drained, self._errors = self._errors, []
        return drained

    def has_errors(self) -> bool:
        with self._errors_lock:
            return bool(self._errors)

    # -- store ----------------------------------------------------------------

    def resolve(self, key: str, find_by_path: bool = True) -> Any:
        """Return the raw value at ``key``, raising on failure.

        Mappings and sequences are returned as deep copies made under the
        read lock; changing them never changes the store.

        Args:
            key: Dotted key path.
            find_by_path: When False only top-level keys are matched.

        Raises:
            InvalidKeyError: If the key is empty after normalization.
            KeyNotFoundError: If nothing is stored at the key.
            PathIndexError: If a segment is not a valid sequence index.
            UnsupportedPathError: If the path descends into a scalar.
        """
        path = normalize_key(key)
        if not path:
            raise InvalidKeyError(key=key)
        with self._reading():
            return to_plain(resolve_path(self._data, path, find_by_path))

    def get(self, key: str, find_by_path: bool = True) -> Lookup:
        """Return a copy of the raw value at ``key`` as a :class:`Lookup`."""
        try:
            return Lookup(self.resolve(key, find_by_path), True)
        except ConfigError as e:
            self._record(e)
            return _MISS

    def exists(self, key: str, find_by_path: bool = True) -> bool:
        return self.get(key, find_by_path).ok

    def set(self, key: str, value: Any, set_by_path: bool = True) -> None:
        """Store a copy of ``value`` at ``key``.

        Dotted keys create missing intermediate maps. Cached results for the
        key are left as they are.

        Raises:
            ReadOnlyError: If the config was created read-only.
            InvalidKeyError: If the key is empty after normalization.
            PathIndexError: If a segment is not a valid sequence index.
            UnsupportedPathError: If the path descends into a scalar.
        """
        if self._options.read_only or self._lock is None:
            raise ReadOnlyError(key=key)
        node = normalize(value)
        with self._lock.write():
            assign_path(self._data, key, node, set_by_path)
        _logger.debug("Config key set: %s", key)

    def is_empty(self) -> bool:
        with self._reading():
            return not self._data

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the whole store."""
        with self._reading():
            return to_plain(self._data)

    # -- cache ----------------------------------------------------------------

    def clear_caches(self, kind: CacheKind | None = None) -> None:
        """Drop cached results of one kind, or of every kind."""
        if self._cache is not None:
            self._cache.clear(kind)
            _logger.debug("Config caches cleared: %s", kind.value if kind else "all")

    def cache_size(self, kind: CacheKind | None = None) -> int:
        return self._cache.size(kind) if self._cache is not None else 0

    def _cached(self, kind: CacheKind, key: str, compute: Callable[[str], Lookup]) -> Lookup:
        path = normalize_key(key)
        if self._cache is not None and path:
            value, hit = self._cache.get(kind, path)
            if hit:
                return Lookup(value, True)
        result = compute(key)
        if result.ok and self._cache is not None:
            self._cache.put(kind, path, result.value)
        return result

    # -- scalars --------------------------------------------------------------

    def get_string(self, key: str) -> Lookup:
        """Return the value at ``key`` as text.

        Booleans and numbers are rendered in canonical form. Strings are
        expanded for ``${NAME|default}`` tokens when ``parse_env`` is set.
        """
        return self._cached(CacheKind.STRING, key, self._string)

    def _string(self, key: str) -> Lookup:
        raw, ok = self.get(key)
        if not ok:
            return _MISS
        if not is_scalar(raw):
            self._record(CoercionError(key=key, target="str", value=raw))
            return _MISS
        value = format_scalar(raw)
        if isinstance(raw, str) and self._options.parse_env:
            value = expand_env(value)
        return Lookup(value, True)

    def _parse_string(self, key: str, parser: Callable[[str], Any], target: str) -> Lookup:
        text, ok = self.get_string(key)
        if not ok:
            return _MISS
        try:
            return Lookup(parser(text), True)
        except ValueError as e:
            self._record(CoercionError(key=key, target=target, value=text, cause=e))
            return _MISS

    def get_int(self, key: str) -> Lookup:
        return self._parse_string(key, parse_int, "int")

    def get_int64(self, key: str) -> Lookup:
        """Same as :meth:`get_int`; values are already bounded to 64 bits."""
        return self.get_int(key)

    def get_bool(self, key: str) -> Lookup:
        """Parse ``1/0``, ``true/false``, ``yes/no`` (any case); empty text is False."""
        return self._parse_string(key, parse_bool, "bool")

    def get_float(self, key: str) -> Lookup:
        return self._parse_string(key, parse_float, "float")

    # -- collections ----------------------------------------------------------

    def get_ints(self, key: str) -> Lookup:
        """Return a sequence whose every element parses as an integer."""
        return self._cached(CacheKind.INTS, key, self._ints)

    def _ints(self, key: str) -> Lookup:
        raw, ok = self.get(key)
        if not ok:
            return _MISS
        if node_kind(raw) is not NodeKind.SEQUENCE:
            self._record(CoercionError(key=key, target="list[int]", value=raw))
            return _MISS
        try:
            values = [parse_int(to_text(item)) for item in raw]
        except ValueError as e:
            self._record(CoercionError(key=key, target="list[int]", value=raw, cause=e))
            return _MISS
        return Lookup(values, True)

    def get_strings(self, key: str) -> Lookup:
        return self._cached(CacheKind.STRINGS, key, self._strings)

    def _strings(self, key: str) -> Lookup:
        raw, ok = self.get(key)
        if not ok:
            return _MISS
        if node_kind(raw) is not NodeKind.SEQUENCE:
            self._record(CoercionError(key=key, target="list[str]", value=raw))
            return _MISS
        return Lookup([to_text(item) for item in raw], True)

    def get_string_map(self, key: str) -> Lookup:
        """Return a mapping with text keys and text values."""
        return self._cached(CacheKind.STRING_MAP, key, self._string_map)

    def _string_map(self, key: str) -> Lookup:
        raw, ok = self.get(key)
        if not ok:
            return _MISS
        if node_kind(raw) not in _MAP_KINDS:
            self._record(CoercionError(key=key, target="dict[str, str]", value=raw))
            return _MISS
        return Lookup({to_text(k): to_text(v) for k, v in raw.items()}, True)

    def get_int_map(self, key: str) -> Lookup:
        """Return a mapping with text keys whose every value parses as an integer."""
        return self._cached(CacheKind.INT_MAP, key, self._int_map)

    def _int_map(self, key: str) -> Lookup:
        raw, ok = self.get(key)
        if not ok:
            return _MISS
        if node_kind(raw) not in _MAP_KINDS:
            self._record(CoercionError(key=key, target="dict[str, int]", value=raw))
            return _MISS
        try:
            values = {to_text(k): parse_int(to_text(v)) for k, v in raw.items()}
        except ValueError as e:
            self._record(CoercionError(key=key, target="dict[str, int]", value=raw, cause=e))
            return _MISS
        return Lookup(values, True)

    # -- structures -----------------------------------------------------------

    def structure(self, key: str, target: type[T]) -> T:
        """Decode the value at ``key`` into ``target``.

        An empty key maps the whole store. Usage::

            db = config.structure("db", DatabaseSettings)

        Raises:
            KeyNotFoundError: If nothing is stored at the key.
            EncodingError: If the value cannot be encoded or does not fit
                ``target``.
        """
        if not normalize_key(key):
            with self._reading():
                data = to_plain(self._data)
        else:
            data = self.resolve(key)
        return map_structure(data, target, key=key)

    def map_struct(self, key: str, target: type[T]) -> T:
        """Alias of :meth:`structure`."""
        return self.structure(key, target)

    def map_structure(self, key: str, target: type[T]) -> T:
        """Alias of :meth:`structure`."""
        return self.structure(key, target)

    # -- defaults -------------------------------------------------------------

    def def_string(self, key: str, default: str = "") -> str:
        return self.get_string(key).or_default(default)

    def def_int(self, key: str, default: int = 0) -> int:
        return self.get_int(key).or_default(default)

    def def_int64(self, key: str, default: int = 0) -> int:
        return self.get_int64(key).or_default(default)

    def def_bool(self, key: str, default: bool = False) -> bool:
        return self.get_bool(key).or_default(default)

    def def_float(self, key: str, default: float = 0.0) -> float:
        return self.get_float(key).or_default(default)

    def def_ints(self, key: str, default: list[int] | None = None) -> list[int]:
        return self.get_ints(key).or_default([] if default is None else default)

    def def_strings(self, key: str, default: list[str] | None = None) -> list[str]:
        return self.get_strings(key).or_default([] if default is None else default)

    def def_string_map(self, key: str, default: dict[str, str] | None = None) -> dict[str, str]:
        return self.get_string_map(key).or_default({} if default is None else default)

    def def_int_map(self, key: str, default: dict[str, int] | None = None) -> dict[str, int]:
        return self.get_int_map(key).or_default({} if default is None else default)

    def must_string(self, key: str) -> str:
        return self.def_string(key)

    def must_int(self, key: str) -> int:
        return self.def_int(key)

    def must_int64(self, key: str) -> int:
        return self.def_int64(key)

    def must_bool(self, key: str) -> bool:
        return self.def_bool(key)
