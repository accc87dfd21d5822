from .domain import (
    Address,
    AuthenticationMode,
    ChargingFacility,
    ChargingPointOperator,
    ChargingStation,
    ChargingStationName,
    Day,
    DynamicInfoAvailable,
    EVSEStatus,
    EVSEStatusRecord,
    GeoCoordinates,
    OpeningTime,
    OperatorStatus,
    PaymentOption,
    Period,
)

__all__ = [
    "Address",
    "AuthenticationMode",
    "ChargingFacility",
    "ChargingPointOperator",
    "ChargingStation",
    "ChargingStationName",
    "Day",
    "DynamicInfoAvailable",
    "EVSEStatus",
    "EVSEStatusRecord",
    "GeoCoordinates",
    "OpeningTime",
    "OperatorStatus",
    "PaymentOption",
    "Period",
]
