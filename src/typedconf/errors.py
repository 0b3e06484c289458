"""Error hierarchy for typedconf lookups."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "ConfigError",
    "InvalidKeyError",
    "KeyNotFoundError",
    "PathIndexError",
    "UnsupportedPathError",
    "CoercionError",
    "EncodingError",
    "ReadOnlyError",
    "ErrorCodes",
]


class ConfigError(Exception):
    """Base error for all typedconf errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def key(self) -> str | None:
        """The key path the error refers to, when known."""
        return self.details.get("key")


class InvalidKeyError(ConfigError):
    """Raised when a key path is empty after normalization."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="INVALID_KEY",
            message=f"Invalid config key string: {key!r}",
            details={"key": key},
            **kwargs,
        )


class KeyNotFoundError(ConfigError):
    """Raised when a key path (or a prefix of it) has no value."""

    def __init__(self, key: str, segment: str | None = None, **kwargs: Any) -> None:
        message = f"Key not found: {key}"
        if segment is not None and segment != key:
            message += f" (segment '{segment}')"
        super().__init__(
            code="KEY_NOT_FOUND",
            message=message,
            details={"key": key, "segment": segment},
            **kwargs,
        )


class PathIndexError(ConfigError):
    """Raised when a segment addressing a sequence is not a valid index."""

    def __init__(self, key: str, segment: str, length: int, **kwargs: Any) -> None:
        super().__init__(
            code="PATH_INDEX_ERROR",
            message=f"Invalid index '{segment}' for sequence of length {length} in key '{key}'",
            details={"key": key, "segment": segment, "length": length},
            **kwargs,
        )

    @property
    def segment(self) -> str:
        """The offending path segment."""
        return self.details["segment"]

    @property
    def length(self) -> int:
        """Length of the sequence the segment tried to index."""
        return self.details["length"]


class UnsupportedPathError(ConfigError):
    """Raised when a path descends into a value that is neither mapping nor sequence."""

    def __init__(self, key: str, segment: str, node_type: str, **kwargs: Any) -> None:
        super().__init__(
            code="UNSUPPORTED_PATH",
            message=f"Cannot get value of the key '{key}': segment '{segment}' addresses a {node_type}",
            details={"key": key, "segment": segment, "node_type": node_type},
            **kwargs,
        )

    @property
    def node_type(self) -> str:
        """Type name of the node that could not be descended into."""
        return self.details["node_type"]


class CoercionError(ConfigError):
    """Raised when a resolved value cannot be converted to the requested type."""

    def __init__(self, key: str, target: str, value: Any, **kwargs: Any) -> None:
        super().__init__(
            code="COERCION_ERROR",
            message=f"Value of the key '{key}' cannot be converted to {target}",
            details={"key": key, "target": target, "value_type": type(value).__name__},
            **kwargs,
        )

    @property
    def target(self) -> str:
        """Name of the requested target type."""
        return self.details["target"]


class EncodingError(ConfigError):
    """Raised when the structure mapping round trip fails in either direction."""

    def __init__(self, key: str, target: str, direction: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="ENCODING_ERROR",
            message=f"Cannot {direction} the key '{key}' as {target}: {reason}",
            details={"key": key, "target": target, "direction": direction},
            **kwargs,
        )

    @property
    def direction(self) -> str:
        """Either 'encode' or 'decode'."""
        return self.details["direction"]


class ReadOnlyError(ConfigError):
    """Raised when writing to a config created in read-only mode."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="READ_ONLY",
            message=f"Cannot set '{key}': the config is in read-only mode",
            details={"key": key},
            **kwargs,
        )


class ErrorCodes:
    """All typedconf error codes as constants.

    Example:
        if error.code == ErrorCodes.PATH_INDEX_ERROR:
            handle_bad_index()
    """

    INVALID_KEY = "INVALID_KEY"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    PATH_INDEX_ERROR = "PATH_INDEX_ERROR"
    UNSUPPORTED_PATH = "UNSUPPORTED_PATH"
    COERCION_ERROR = "COERCION_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"
    READ_ONLY = "READ_ONLY"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
