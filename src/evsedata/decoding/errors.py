"""Errors raised while decoding the EVSE feeds."""

from typing import Any

UNKNOWN_RECORD = "unknown"


class DecodeError(ValueError):
    """
    Base class for feed decoding failures.

    Carries the offending field, the best-effort record identifier and, once
    the feed decoder has seen it, the position of the record in the feed as
    (data_record_index, station_index).
    """

    def __init__(self, field: str, detail: str, record_id: str | None = None):
        self.field = field
        self.detail = detail
        self.record_id = record_id or UNKNOWN_RECORD
        self.position: tuple[int, int] | None = None
        super().__init__(detail)

    def __str__(self) -> str:
        where = f"record {self.record_id!r}"
        if self.position is not None:
            where += f" at EVSEData[{self.position[0]}].EVSEDataRecord[{self.position[1]}]"
        return f"{where}, field {self.field!r}: {self.detail}"


class FieldCoercionError(DecodeError):
    """A raw value cannot be coerced to the field's target type."""

    def __init__(self, field: str, raw_value: Any, target_kind: str, record_id: str | None = None):
        self.raw_value = raw_value
        self.target_kind = target_kind
        super().__init__(field, f"cannot coerce {raw_value!r} to {target_kind}", record_id)


class FieldShapeError(DecodeError):
    """A list-shaped field is neither a single object nor an array of objects."""

    def __init__(self, field: str, raw_value: Any, expected: str, record_id: str | None = None):
        self.raw_value = raw_value
        self.expected = expected
        super().__init__(
            field, f"expected {expected} or a list of them, got {type(raw_value).__name__}", record_id
        )


class UnknownEnumValueError(DecodeError):
    """A strict enum field received a value with no matching variant."""

    def __init__(self, field: str, raw_value: Any, enum_name: str, record_id: str | None = None):
        self.raw_value = raw_value
        self.enum_name = enum_name
        super().__init__(field, f"{raw_value!r} is not a valid {enum_name}", record_id)


class MissingRequiredFieldError(DecodeError):
    """A required key is absent from the JSON object."""

    def __init__(self, field: str, record_id: str | None = None):
        super().__init__(field, "required field is missing", record_id)


class UpstreamFaultError(Exception):
    """The upstream feed could not be fetched."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)
