"""Environment variable interpolation for string config values."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

__all__ = ["ENV_TOKEN_PATTERN", "expand_env"]

# ${NAME} or ${NAME|default}, e.g. "${HOME}/${APP_ENV | prod}/dir"
ENV_TOKEN_PATTERN = re.compile(r"\$\{([\w\-| ]+)\}", re.ASCII)


def _resolve_token(token: str, inner: str, environ: Mapping[str, str]) -> str:
    parts = inner.split("|", 1)
    if len(parts) == 2:
        name, default = parts[0].strip(), parts[1].strip()
    else:
        # No default: an unset variable leaves the token untouched
        name, default = parts[0], token
    return environ.get(name) or default


def expand_env(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace ``${NAME}`` and ``${NAME|default}`` tokens in ``value``.

    Each distinct token is resolved once against ``environ`` (the process
    environment by default); an empty or missing variable falls back to the
    token's default, or to the token text itself when it has none.
    """
    if "${" not in value:
        return value
    if environ is None:
        environ = os.environ

    resolved: dict[str, str] = {}
    for match in ENV_TOKEN_PATTERN.finditer(value):
        token = match.group(0)
        if token not in resolved:
            resolved[token] = _resolve_token(token, match.group(1), environ)
    if not resolved:
        return value

    return ENV_TOKEN_PATTERN.sub(lambda m: resolved[m.group(0)], value)
