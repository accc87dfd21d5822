"""Tolerant decoding of the EVSE data and status feeds."""

from .errors import (
    DecodeError,
    FieldCoercionError,
    FieldShapeError,
    MissingRequiredFieldError,
    UnknownEnumValueError,
    UpstreamFaultError,
)
from .feed import (
    FeedDecodeResult,
    decode_feed,
    decode_feed_collecting,
    decode_status_feed,
    deduplicate,
)
from .station import decode_station
from .status import decode_status_record

__all__ = [
    "DecodeError",
    "FeedDecodeResult",
    "FieldCoercionError",
    "FieldShapeError",
    "MissingRequiredFieldError",
    "UnknownEnumValueError",
    "UpstreamFaultError",
    "decode_feed",
    "decode_feed_collecting",
    "decode_station",
    "decode_status_feed",
    "decode_status_record",
    "deduplicate",
]
