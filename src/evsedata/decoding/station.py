"""Record decoder: one raw station object to a ChargingStation."""

from enum import Enum
from typing import Any, TypeVar

from ..models import (
    Address,
    AuthenticationMode,
    ChargingFacility,
    ChargingStation,
    ChargingStationName,
    Day,
    DynamicInfoAvailable,
    GeoCoordinates,
    OpeningTime,
    PaymentOption,
    Period,
)
from .errors import FieldCoercionError, MissingRequiredFieldError, UnknownEnumValueError
from .scalars import (
    coerce_bool,
    coerce_number,
    coerce_timestamp,
    expect_bool,
    expect_number,
    expect_string,
    expect_string_list,
)
from .shapes import one_or_many

E = TypeVar("E", bound=Enum)

_DAY_ALIASES = {
    "monday": Day.MONDAY,
    "tuesday": Day.TUESDAY,
    "wednesday": Day.WEDNESDAY,
    "thursday": Day.THURSDAY,
    "friday": Day.FRIDAY,
    "saturday": Day.SATURDAY,
    "sunday": Day.SUNDAY,
    "workdays": Day.WORKDAYS,
    "weekdays": Day.WORKDAYS,
    "everyday": Day.EVERYDAY,
    "daily": Day.EVERYDAY,
    "all days": Day.EVERYDAY,
    "alldays": Day.EVERYDAY,
    "weekend": Day.WEEKEND,
    "weekends": Day.WEEKEND,
}


class _ObjectReader:
    """Field access on one raw JSON object, tagging errors with a record id."""

    def __init__(self, raw: Any, record_id: str | None = None, prefix: str = ""):
        self.raw = raw
        self.record_id = record_id
        self.prefix = prefix

    def name(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def required(self, key: str) -> Any:
        if key not in self.raw:
            raise MissingRequiredFieldError(self.name(key), self.record_id)
        return self.raw[key]

    def optional(self, key: str) -> Any:
        return self.raw.get(key)

    def required_string(self, key: str) -> str:
        return expect_string(self.required(key), self.name(key), self.record_id)

    def optional_string(self, key: str) -> str | None:
        value = self.optional(key)
        if value is None:
            return None
        return expect_string(value, self.name(key), self.record_id)

    def optional_number(self, key: str, lenient: bool = False) -> float | None:
        value = self.optional(key)
        if value is None:
            return None
        if lenient:
            return coerce_number(value, self.name(key), self.record_id)
        return expect_number(value, self.name(key), self.record_id)

    def optional_bool(self, key: str) -> bool | None:
        value = self.optional(key)
        if value is None:
            return None
        return expect_bool(value, self.name(key), self.record_id)

    def required_object(self, key: str) -> dict[str, Any]:
        value = self.required(key)
        if not isinstance(value, dict):
            raise FieldCoercionError(self.name(key), value, "object", self.record_id)
        return value

    def list_of_objects(self, key: str, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            raise FieldCoercionError(self.name(key), value, "list of objects", self.record_id)
        return value

    def nested(self, key: str, raw: dict[str, Any]) -> "_ObjectReader":
        return _ObjectReader(raw, self.record_id, prefix=f"{self.name(key)}.")


def _strict_enum_list(value: Any, field: str, enum_type: type[E], record_id: str | None) -> list[E]:
    """
    Decode a list of strict enum values.

    Values are trimmed before matching. One unmatched value fails the whole
    list, there is no catch-all variant to fall back to.
    """
    if not isinstance(value, list):
        raise FieldCoercionError(field, value, f"list of {enum_type.__name__}", record_id)

    result = []
    for item in value:
        if not isinstance(item, str):
            raise FieldCoercionError(field, item, enum_type.__name__, record_id)
        try:
            result.append(enum_type(item.strip()))
        except ValueError:
            raise UnknownEnumValueError(field, item, enum_type.__name__, record_id) from None
    return result


def decode_day(raw: str) -> Day:
    """Case-insensitive day lookup, unknown selectors map to Day.UNKNOWN."""
    return _DAY_ALIASES.get(raw.strip().lower(), Day.UNKNOWN)


def decode_dynamic_info(value: Any, field: str, record_id: str | None = None) -> DynamicInfoAvailable:
    """Exact, case-sensitive match against "true", "false" and "auto"."""
    if not isinstance(value, str):
        raise FieldCoercionError(field, value, "string", record_id)
    try:
        return DynamicInfoAvailable(value)
    except ValueError:
        raise UnknownEnumValueError(field, value, "DynamicInfoAvailable", record_id) from None


def decode_address(raw: dict[str, Any], record_id: str | None = None) -> Address:
    r = _ObjectReader(raw, record_id, prefix="Address.")
    return Address(
        street=r.required_string("Street"),
        city=r.required_string("City"),
        country=r.required_string("Country"),
        house_num=r.optional_string("HouseNum"),
        postal_code=r.optional_string("PostalCode"),
        region=r.optional_string("Region"),
        time_zone=r.optional_string("TimeZone"),
        floor=r.optional_string("Floor"),
        parking_spot=r.optional_string("ParkingSpot"),
        parking_facility=r.optional_bool("ParkingFacility"),
    )


def decode_coordinates(raw: dict[str, Any], field: str, record_id: str | None = None) -> GeoCoordinates:
    r = _ObjectReader(raw, record_id, prefix=f"{field}.")
    return GeoCoordinates(google=r.required_string("Google"))


def decode_facility(raw: dict[str, Any], record_id: str | None = None) -> ChargingFacility:
    """Power, amperage and voltage may each be a number or a numeric string."""
    r = _ObjectReader(raw, record_id, prefix="ChargingFacilities.")
    return ChargingFacility(
        power=r.optional_number("power", lenient=True),
        amperage=r.optional_number("Amperage", lenient=True),
        voltage=r.optional_number("Voltage", lenient=True),
        power_type=r.optional_string("powertype"),
    )


def decode_name(raw: dict[str, Any], record_id: str | None = None) -> ChargingStationName:
    r = _ObjectReader(raw, record_id, prefix="ChargingStationNames.")
    return ChargingStationName(lang=r.required_string("lang"), value=r.required_string("value"))


def decode_period(raw: dict[str, Any], record_id: str | None = None) -> Period:
    r = _ObjectReader(raw, record_id, prefix="OpeningTimes.Period.")
    return Period(begin=r.required_string("begin"), end=r.required_string("end"))


def decode_opening_time(raw: dict[str, Any], record_id: str | None = None) -> OpeningTime:
    """Decode one opening-time entry; Period may be one object or a list."""
    r = _ObjectReader(raw, record_id, prefix="OpeningTimes.")
    raw_day = r.required_string("on")
    periods = one_or_many(
        r.required("Period"),
        r.name("Period"),
        lambda item: decode_period(item, record_id),
        expected="Period object",
        record_id=record_id,
    )
    return OpeningTime(on=decode_day(raw_day), periods=periods, raw_day=raw_day)


def decode_station(raw: Any) -> ChargingStation:
    """
    Decode one station object.

    Raises a DecodeError subclass naming the field and the station id on the
    first required field that is missing or cannot be coerced.
    """
    if not isinstance(raw, dict):
        raise FieldCoercionError("EVSEDataRecord", raw, "object")

    r = _ObjectReader(raw)
    r.record_id = r.required_string("ChargingStationId")
    record_id = r.record_id

    opening_times = r.optional("OpeningTimes")
    if opening_times is not None:
        opening_times = [
            decode_opening_time(item, record_id)
            for item in r.list_of_objects("OpeningTimes", opening_times)
        ]

    payment_options = r.optional("PaymentOptions")
    if payment_options is not None:
        payment_options = _strict_enum_list(payment_options, "PaymentOptions", PaymentOption, record_id)

    value_added_services = r.optional("ValueAddedServices")
    if value_added_services is not None:
        value_added_services = expect_string_list(value_added_services, "ValueAddedServices", record_id)

    last_update = r.optional("lastUpdate")
    if last_update is not None:
        last_update = coerce_timestamp(last_update, "lastUpdate", record_id)

    return ChargingStation(
        charging_station_id=record_id,
        evse_id=r.required_string("EvseID"),
        address=decode_address(r.required_object("Address"), record_id),
        geo_coordinates=decode_coordinates(
            r.required_object("GeoCoordinates"), "GeoCoordinates", record_id
        ),
        geo_charging_point_entrance=decode_coordinates(
            r.required_object("GeoChargingPointEntrance"), "GeoChargingPointEntrance", record_id
        ),
        is_open_24_hours=coerce_bool(r.required("IsOpen24Hours"), "IsOpen24Hours", record_id),
        renewable_energy=expect_bool(r.required("RenewableEnergy"), "RenewableEnergy", record_id),
        dynamic_info_available=decode_dynamic_info(
            r.required("DynamicInfoAvailable"), "DynamicInfoAvailable", record_id
        ),
        charging_facilities=[
            decode_facility(item, record_id)
            for item in r.list_of_objects("ChargingFacilities", r.required("ChargingFacilities"))
        ],
        authentication_modes=_strict_enum_list(
            r.required("AuthenticationModes"), "AuthenticationModes", AuthenticationMode, record_id
        ),
        plugs=expect_string_list(r.required("Plugs"), "Plugs", record_id),
        charging_station_names=one_or_many(
            r.optional("ChargingStationNames"),
            "ChargingStationNames",
            lambda item: decode_name(item, record_id),
            expected="ChargingStationName object",
            record_id=record_id,
        ),
        payment_options=payment_options,
        opening_times=opening_times,
        value_added_services=value_added_services,
        clearinghouse_id=r.optional_string("ClearinghouseID"),
        hub_operator_id=r.optional_string("HubOperatorID"),
        charging_pool_id=r.optional_string("ChargingPoolID"),
        accessibility=r.optional_string("Accessibility"),
        accessibility_location=r.optional_string("AccessibilityLocation"),
        calibration_law_data_availability=r.optional_string("CalibrationLawDataAvailability"),
        hotline_phone_number=r.optional_string("HotlinePhoneNumber"),
        charging_station_location_reference=r.optional_string("ChargingStationLocationReference"),
        energy_source=r.optional_string("EnergySource"),
        environmental_impact=r.optional_string("EnvironmentalImpact"),
        location_image=r.optional_string("LocationImage"),
        suboperator_name=r.optional_string("SuboperatorName"),
        hardware_manufacturer=r.optional_string("HardwareManufacturer"),
        additional_info=r.optional_string("AdditionalInfo"),
        max_capacity=r.optional_number("MaxCapacity"),
        dynamic_power_level=r.optional_bool("DynamicPowerLevel"),
        delta_type=r.optional_string("deltaType"),
        last_update=last_update,
    )
