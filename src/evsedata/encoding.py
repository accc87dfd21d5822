"""
Re-encoding of decoded models to the canonical wire shape.

Field names match the upstream feed; values are strictly typed (numbers and
booleans are never string-encoded), enums are written as their wire values
and timestamps as ISO8601 with a "Z" suffix for UTC.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from .models import (
    Address,
    ChargingFacility,
    ChargingPointOperator,
    ChargingStation,
    OpeningTime,
    OperatorStatus,
)


def iso_format(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _values(items: list[Enum] | None) -> list[str] | None:
    if items is None:
        return None
    return [item.value for item in items]


def address_to_dict(address: Address) -> dict[str, Any]:
    return _compact(
        {
            "Street": address.street,
            "HouseNum": address.house_num,
            "PostalCode": address.postal_code,
            "City": address.city,
            "Region": address.region,
            "Country": address.country,
            "TimeZone": address.time_zone,
            "Floor": address.floor,
            "ParkingSpot": address.parking_spot,
            "ParkingFacility": address.parking_facility,
        }
    )


def facility_to_dict(facility: ChargingFacility) -> dict[str, Any]:
    return _compact(
        {
            "power": facility.power,
            "powertype": facility.power_type,
            "Amperage": facility.amperage,
            "Voltage": facility.voltage,
        }
    )


def opening_time_to_dict(opening_time: OpeningTime) -> dict[str, Any]:
    return {
        "on": opening_time.raw_day or opening_time.on.value,
        "Period": [{"begin": p.begin, "end": p.end} for p in opening_time.periods],
    }


def station_to_dict(station: ChargingStation, include_status: bool = False) -> dict[str, Any]:
    """Encode a station; the live status is not part of the data feed and is opt-in."""
    data = {
        "ChargingStationId": station.charging_station_id,
        "EvseID": station.evse_id,
        "ClearinghouseID": station.clearinghouse_id,
        "HubOperatorID": station.hub_operator_id,
        "ChargingPoolID": station.charging_pool_id,
        "Address": address_to_dict(station.address),
        "GeoCoordinates": {"Google": station.geo_coordinates.google},
        "GeoChargingPointEntrance": {"Google": station.geo_charging_point_entrance.google},
        "ChargingFacilities": [facility_to_dict(f) for f in station.charging_facilities],
        "AuthenticationModes": _values(station.authentication_modes),
        "Plugs": list(station.plugs),
        "PaymentOptions": _values(station.payment_options),
        "IsOpen24Hours": station.is_open_24_hours,
        "RenewableEnergy": station.renewable_energy,
        "DynamicInfoAvailable": station.dynamic_info_available.value,
        "ChargingStationNames": [
            {"lang": n.lang, "value": n.value} for n in station.charging_station_names
        ],
        "OpeningTimes": (
            [opening_time_to_dict(ot) for ot in station.opening_times]
            if station.opening_times is not None
            else None
        ),
        "ValueAddedServices": station.value_added_services,
        "Accessibility": station.accessibility,
        "AccessibilityLocation": station.accessibility_location,
        "CalibrationLawDataAvailability": station.calibration_law_data_availability,
        "HotlinePhoneNumber": station.hotline_phone_number,
        "ChargingStationLocationReference": station.charging_station_location_reference,
        "EnergySource": station.energy_source,
        "EnvironmentalImpact": station.environmental_impact,
        "LocationImage": station.location_image,
        "SuboperatorName": station.suboperator_name,
        "HardwareManufacturer": station.hardware_manufacturer,
        "AdditionalInfo": station.additional_info,
        "MaxCapacity": station.max_capacity,
        "DynamicPowerLevel": station.dynamic_power_level,
        "deltaType": station.delta_type,
        "lastUpdate": iso_format(station.last_update) if station.last_update else None,
    }
    if include_status and station.status is not None:
        data["EVSEStatus"] = station.status.value
    return _compact(data)


def status_to_dict(operator: OperatorStatus) -> dict[str, Any]:
    return {
        "OperatorID": operator.operator_id,
        "OperatorName": operator.operator_name,
        "EVSEStatusRecord": [
            {"EvseID": r.evse_id, "EVSEStatus": r.status.value} for r in operator.records
        ],
    }


def operator_to_dict(operator: ChargingPointOperator) -> dict[str, Any]:
    return {
        "OperatorID": operator.operator_id,
        "Name": operator.name,
        "StartDate": operator.start_date.isoformat() if operator.start_date else None,
        "IncludedNetworks": list(operator.included_networks),
        "WithRealTimeData": operator.with_real_time_data,
    }
