"""Domain models for the EVSE open-data feed."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class AuthenticationMode(str, Enum):
    """Authentication methods accepted at a station. Closed set, no fallback."""

    REMOTE = "REMOTE"
    NFC_RFID_CLASSIC = "NFC RFID Classic"
    NFC_RFID_DESFIRE = "NFC RFID DESFire"
    DIRECT_PAYMENT = "Direct Payment"
    PLUG_AND_CHARGE = "PnC"


class PaymentOption(str, Enum):
    """Payment methods accepted at a station. Closed set, no fallback."""

    DIRECT = "Direct"
    CONTRACT = "Contract"
    NO_PAYMENT = "No Payment"


class DynamicInfoAvailable(str, Enum):
    """Whether live status is published for a station."""

    YES = "true"
    NO = "false"
    AUTO = "auto"


class EVSEStatus(str, Enum):
    """
    Live status of a single EVSE.

    Lenient: unrecognized wire values map to UNKNOWN instead of failing.
    """

    AVAILABLE = "Available"
    OUT_OF_SERVICE = "OutOfService"
    UNKNOWN = "Unknown"
    OCCUPIED = "Occupied"


class Day(str, Enum):
    """
    Day selector of an opening-time entry.

    Lenient: unrecognized wire values map to UNKNOWN and the original string
    is kept on OpeningTime.raw_day.
    """

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"
    WORKDAYS = "Workdays"
    EVERYDAY = "Everyday"
    WEEKEND = "Weekend"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Address:
    """Postal address of a charging station."""

    street: str
    city: str
    country: str
    house_num: Optional[str] = None
    postal_code: Optional[str] = None
    region: Optional[str] = None
    time_zone: Optional[str] = None
    floor: Optional[str] = None
    parking_spot: Optional[str] = None
    parking_facility: Optional[bool] = None


@dataclass(frozen=True)
class GeoCoordinates:
    """Coordinates in the upstream "Google" format, e.g. "47.3769 8.5469"."""

    google: str

    @property
    def lat_lon(self) -> tuple[float, float] | None:
        parts = self.google.replace(",", " ").split()
        if len(parts) != 2:
            return None
        try:
            return float(parts[0]), float(parts[1])
        except ValueError:
            return None


@dataclass(frozen=True)
class ChargingFacility:
    """A single charging outlet: power (kW), amperage (A), voltage (V)."""

    power: Optional[float] = None
    amperage: Optional[float] = None
    voltage: Optional[float] = None
    power_type: Optional[str] = None


@dataclass(frozen=True)
class ChargingStationName:
    """A localized station name."""

    lang: str
    value: str


@dataclass(frozen=True)
class Period:
    """An opening window, "HH:MM" strings as published."""

    begin: str
    end: str


@dataclass(frozen=True)
class OpeningTime:
    """Opening windows for one day selector."""

    on: Day
    periods: list[Period] = field(default_factory=list)
    raw_day: str = ""


@dataclass(frozen=True)
class ChargingStation:
    """A charging station as published in the EVSE data feed."""

    charging_station_id: str
    evse_id: str
    address: Address
    geo_coordinates: GeoCoordinates
    geo_charging_point_entrance: GeoCoordinates
    is_open_24_hours: bool
    renewable_energy: bool
    dynamic_info_available: DynamicInfoAvailable
    charging_facilities: list[ChargingFacility] = field(default_factory=list)
    authentication_modes: list[AuthenticationMode] = field(default_factory=list)
    plugs: list[str] = field(default_factory=list)
    charging_station_names: list[ChargingStationName] = field(default_factory=list)
    payment_options: Optional[list[PaymentOption]] = None
    opening_times: Optional[list[OpeningTime]] = None
    value_added_services: Optional[list[str]] = None
    clearinghouse_id: Optional[str] = None
    hub_operator_id: Optional[str] = None
    charging_pool_id: Optional[str] = None
    accessibility: Optional[str] = None
    accessibility_location: Optional[str] = None
    calibration_law_data_availability: Optional[str] = None
    hotline_phone_number: Optional[str] = None
    charging_station_location_reference: Optional[str] = None
    energy_source: Optional[str] = None
    environmental_impact: Optional[str] = None
    location_image: Optional[str] = None
    suboperator_name: Optional[str] = None
    hardware_manufacturer: Optional[str] = None
    additional_info: Optional[str] = None
    max_capacity: Optional[float] = None
    dynamic_power_level: Optional[bool] = None
    delta_type: Optional[str] = None
    last_update: Optional[datetime] = None
    status: Optional[EVSEStatus] = None

    @property
    def station_name(self) -> str | None:
        """First published name, if any."""
        if self.charging_station_names:
            return self.charging_station_names[0].value
        return None

    @property
    def coordinates(self) -> tuple[float, float] | None:
        return self.geo_coordinates.lat_lon


@dataclass(frozen=True)
class EVSEStatusRecord:
    """Status of one EVSE, with the wire value kept for diagnostics."""

    evse_id: str
    status: EVSEStatus
    raw_status: str = ""


@dataclass(frozen=True)
class OperatorStatus:
    """All status records published by one operator."""

    operator_id: str
    operator_name: str
    records: list[EVSEStatusRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ChargingPointOperator:
    """Represents an operator from the known-operator catalog."""

    operator_id: str
    name: str
    start_date: Optional[date] = None
    included_networks: list[str] = field(default_factory=list)
    with_real_time_data: bool = True
