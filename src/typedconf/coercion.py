"""Canonical text rendering and strict parsing of raw config values.

Every typed accessor funnels through these helpers: a raw value is first
rendered to its canonical text, then parsed into the requested type. The
parsers raise ``ValueError``; ``Config`` turns that into a recorded
``CoercionError``.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

__all__ = [
    "INT64_MIN",
    "INT64_MAX",
    "is_scalar",
    "format_scalar",
    "to_text",
    "parse_int",
    "parse_float",
    "parse_bool",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Integral floats below this magnitude render without a fraction, so that
# a JSON 5432.0 reads back as the integer 5432.
_INTEGRAL_FLOAT_LIMIT = 1e16

_FALSE_WORDS = frozenset({"", "0", "false", "no"})
_TRUE_WORDS = frozenset({"1", "true", "yes"})
_INF_WORDS = frozenset({"inf", "infinity"})


def is_scalar(value: Any) -> bool:
    """Return True for the raw types the string accessor accepts."""
    return isinstance(value, (str, bool, int, float))


def format_scalar(value: str | bool | int | float) -> str:
    """Render a scalar in its canonical text form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < _INTEGRAL_FLOAT_LIMIT:
            return str(int(value))
        return repr(value)
    return value


def to_text(value: Any) -> str:
    """Render any element of a sequence or mapping as text.

    Scalars use :func:`format_scalar`, ``None`` renders as an empty string
    and nested containers render as compact JSON.
    """
    if value is None:
        return ""
    if is_scalar(value):
        return format_scalar(value)
    try:
        return json.dumps(value, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return str(value)


def parse_int(text: str) -> int:
    """Parse base-10 text into a signed 64-bit integer.

    Raises:
        ValueError: If the text has surrounding whitespace, separators, or
            does not fit in 64 bits.
    """
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer literal: {text!r}")
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def parse_float(text: str) -> float:
    """Parse text as a 64-bit floating-point literal."""
    if not text or not text.isascii() or text != text.strip() or "_" in text:
        raise ValueError(f"invalid float literal: {text!r}")
    value = float(text)
    if math.isinf(value) and text.lstrip("+-").lower() not in _INF_WORDS:
        raise ValueError(f"float out of range: {text!r}")
    return value


def parse_bool(text: str) -> bool:
    """Parse yes/no style text, case-insensitively."""
    lowered = text.lower()
    if lowered in _FALSE_WORDS:
        return False
    if lowered in _TRUE_WORDS:
        return True
    raise ValueError(f"the value {lowered!r} cannot be converted to bool")
