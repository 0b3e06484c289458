"""Structure mapping: decode a config subtree into a caller-supplied type."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import PydanticUserError, TypeAdapter, ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError, to_json

from typedconf.errors import EncodingError
from typedconf.nodes import to_plain

__all__ = ["map_structure"]

T = TypeVar("T")


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


def map_structure(data: Any, target: type[T], key: str = "") -> T:
    """Round-trip ``data`` through JSON into an instance of ``target``.

    ``target`` may be a pydantic model, a dataclass, a TypedDict or any
    other type a pydantic ``TypeAdapter`` accepts.

    Raises:
        EncodingError: If ``data`` cannot be encoded, or the encoded blob
            does not validate against ``target``, or pydantic cannot
            build a schema for ``target``.
    """
    try:
        blob = to_json(to_plain(data))
    except PydanticSerializationError as e:
        raise EncodingError(
            key=key, target=_type_name(target), direction="encode", reason=str(e), cause=e
        ) from e

    try:
        return TypeAdapter(target).validate_json(blob)
    except (PydanticValidationError, PydanticUserError) as e:
        raise EncodingError(
            key=key, target=_type_name(target), direction="decode", reason=str(e), cause=e
        ) from e
