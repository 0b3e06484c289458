"""Construction-time options for a Config instance."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["Options"]


class Options(BaseModel):
    """Options read once when a Config is created.

    Attributes:
        read_only: The store is never written after construction. Lookups
            skip the reader/writer lock and ``Config.set`` is refused.
        enable_cache: Keep coerced results per accessor kind.
        parse_env: Expand ``${NAME}`` / ``${NAME|default}`` tokens in
            string results.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    read_only: bool = Field(default=False, description="Skip locking; forbid writes")
    enable_cache: bool = Field(default=False, description="Cache coerced results per kind")
    parse_env: bool = Field(default=False, description="Interpolate environment tokens")
