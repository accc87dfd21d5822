"""Decoders for the EVSE status feed."""

from typing import Any

from ..models import EVSEStatus, EVSEStatusRecord, OperatorStatus
from .errors import FieldCoercionError, MissingRequiredFieldError
from .scalars import expect_string

_STATUS_ALIASES = {
    "available": EVSEStatus.AVAILABLE,
    "outofservice": EVSEStatus.OUT_OF_SERVICE,
    "unknown": EVSEStatus.UNKNOWN,
    "evsenotfound": EVSEStatus.UNKNOWN,
    "occupied": EVSEStatus.OCCUPIED,
}


def decode_evse_status(raw: str) -> EVSEStatus:
    """Case-insensitive lookup; anything unrecognized is EVSEStatus.UNKNOWN."""
    return _STATUS_ALIASES.get(raw.strip().lower(), EVSEStatus.UNKNOWN)


def _required(raw: dict[str, Any], key: str, record_id: str | None = None) -> Any:
    if key not in raw:
        raise MissingRequiredFieldError(key, record_id)
    return raw[key]


def decode_status_record(raw: Any, operator_id: str | None = None) -> EVSEStatusRecord:
    if not isinstance(raw, dict):
        raise FieldCoercionError("EVSEStatusRecord", raw, "object", operator_id)

    evse_id = expect_string(_required(raw, "EvseID", operator_id), "EvseID", operator_id)
    raw_status = expect_string(_required(raw, "EVSEStatus", evse_id), "EVSEStatus", evse_id)
    return EVSEStatusRecord(
        evse_id=evse_id,
        status=decode_evse_status(raw_status),
        raw_status=raw_status,
    )


def decode_operator_status(raw: Any) -> OperatorStatus:
    if not isinstance(raw, dict):
        raise FieldCoercionError("EVSEStatuses", raw, "object")

    operator_id = expect_string(_required(raw, "OperatorID"), "OperatorID")
    operator_name = expect_string(
        _required(raw, "OperatorName", operator_id), "OperatorName", operator_id
    )
    records = _required(raw, "EVSEStatusRecord", operator_id)
    if not isinstance(records, list):
        raise FieldCoercionError("EVSEStatusRecord", records, "list of objects", operator_id)

    return OperatorStatus(
        operator_id=operator_id,
        operator_name=operator_name,
        records=[decode_status_record(item, operator_id) for item in records],
    )
