"""
Scalar normalizers.

The upstream feed encodes the same logical value in several wire types
(numbers as strings, booleans as strings, timestamps as ISO8601 strings or
millisecond epochs). These functions coerce a raw JSON value into the target
type or raise FieldCoercionError.
"""

import math
import re
from datetime import UTC, datetime
from typing import Any

from .errors import FieldCoercionError

# Plain decimal notation only, no "1_000", "0x10" or non-ASCII digits
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Tried in order, first match wins. The last one has no offset and is read as UTC.
TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S",
)


def _is_number(value: Any) -> bool:
    # bool is a subclass of int but never a number on the wire
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: Any, field: str, record_id: str | None = None) -> float:
    """Accept a JSON number or a decimal string."""
    if _is_number(value):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not DECIMAL_PATTERN.fullmatch(text):
            raise FieldCoercionError(field, value, "number", record_id)
        result = float(text)
    else:
        raise FieldCoercionError(field, value, "number", record_id)

    if not math.isfinite(result):
        raise FieldCoercionError(field, value, "number", record_id)
    return result


def coerce_bool(value: Any, field: str, record_id: str | None = None) -> bool:
    """Accept a JSON boolean or the strings "true"/"false" in any case."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise FieldCoercionError(field, value, "boolean", record_id)


def parse_timestamp(value: str, field: str = "timestamp", record_id: str | None = None) -> datetime:
    """
    Parse an ISO8601 date-time string.

    Accepts, in order: fractional seconds with offset
    ("2025-09-30T02:15:16.965Z"), offset without fractional seconds
    ("2025-09-30T02:15:16Z"), and no offset at all ("2022-10-26T10:02:07"),
    the latter assumed to be UTC.
    """
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed

    raise FieldCoercionError(field, value, "ISO8601 timestamp", record_id)


def coerce_timestamp(value: Any, field: str, record_id: str | None = None) -> datetime:
    """
    Accept an ISO8601 string or a Unix epoch in milliseconds.

    The epoch form is only tried for JSON numbers, never for numeric strings.
    """
    if isinstance(value, str):
        return parse_timestamp(value, field, record_id)
    if _is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            raise FieldCoercionError(field, value, "epoch milliseconds", record_id) from None
    raise FieldCoercionError(field, value, "timestamp", record_id)


def expect_string(value: Any, field: str, record_id: str | None = None) -> str:
    if not isinstance(value, str):
        raise FieldCoercionError(field, value, "string", record_id)
    return value


def expect_bool(value: Any, field: str, record_id: str | None = None) -> bool:
    """Strict boolean, string forms are rejected."""
    if not isinstance(value, bool):
        raise FieldCoercionError(field, value, "boolean", record_id)
    return value


def expect_number(value: Any, field: str, record_id: str | None = None) -> float:
    """Strict JSON number, string forms are rejected."""
    if not _is_number(value):
        raise FieldCoercionError(field, value, "number", record_id)
    return float(value)


def expect_string_list(value: Any, field: str, record_id: str | None = None) -> list[str]:
    if not isinstance(value, list):
        raise FieldCoercionError(field, value, "list of strings", record_id)
    return [expect_string(item, field, record_id) for item in value]
