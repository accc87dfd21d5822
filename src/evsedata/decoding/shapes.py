"""Decoders for fields the feed emits either as one object or as a list."""

from collections.abc import Callable
from typing import Any, TypeVar

from .errors import DecodeError, FieldShapeError

T = TypeVar("T")


def one_or_many(
    value: Any,
    field: str,
    decode_item: Callable[[dict[str, Any]], T],
    expected: str = "object",
    record_id: str | None = None,
) -> list[T]:
    """
    Normalize a "list of X" field to a list.

    Absent (None) gives an empty list, an array gives every item decoded in
    order, a bare object gives a singleton. Anything else, or an item that
    does not decode as X, raises FieldShapeError.
    """
    if value is None:
        return []

    if isinstance(value, list):
        items = value
    elif isinstance(value, dict):
        items = [value]
    else:
        raise FieldShapeError(field, value, expected, record_id)

    decoded = []
    for item in items:
        if not isinstance(item, dict):
            raise FieldShapeError(field, value, expected, record_id)
        try:
            decoded.append(decode_item(item))
        except DecodeError as e:
            raise FieldShapeError(field, value, expected, record_id) from e
    return decoded
