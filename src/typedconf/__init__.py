"""typedconf - Typed, dotted-path accessors over nested configuration data."""

from __future__ import annotations

# Core
from typedconf.config import Config, Lookup
from typedconf.options import Options

# Cache
from typedconf.cache import CacheKind, ResultCache

# Building blocks
from typedconf.env import expand_env
from typedconf.nodes import NodeKind, node_kind, normalize
from typedconf.resolver import normalize_key
from typedconf.structure import map_structure

# Errors
from typedconf.errors import (
    CoercionError,
    ConfigError,
    EncodingError,
    ErrorCodes,
    InvalidKeyError,
    KeyNotFoundError,
    PathIndexError,
    ReadOnlyError,
    UnsupportedPathError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Config",
    "Lookup",
    "Options",
    # Cache
    "CacheKind",
    "ResultCache",
    # Building blocks
    "expand_env",
    "map_structure",
    "normalize",
    "normalize_key",
    "node_kind",
    "NodeKind",
    # Errors
    "ErrorCodes",
    "ConfigError",
    "InvalidKeyError",
    "KeyNotFoundError",
    "PathIndexError",
    "UnsupportedPathError",
    "CoercionError",
    "EncodingError",
    "ReadOnlyError",
]
