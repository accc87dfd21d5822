"""Repository for charging station operations."""

import json
from collections import defaultdict
from enum import Enum
from typing import Any

from ..decoding.station import decode_day
from ..models import (
    Address,
    AuthenticationMode,
    ChargingFacility,
    ChargingStation,
    ChargingStationName,
    DynamicInfoAvailable,
    EVSEStatus,
    GeoCoordinates,
    OpeningTime,
    PaymentOption,
    Period,
)
from .base import BaseRepository

_SELECT = """
    SELECT s.*,
           a.street, a.house_num, a.postal_code, a.city, a.region, a.country,
           a.time_zone, a.floor, a.parking_spot, a.parking_facility
    FROM station s
    JOIN station_address a ON a.station_id = s.id
"""

_ORDER_BY_LOCATION = " ORDER BY a.city, s.station_name, s.charging_station_id"

# Fields accepted by find_by_field, mapped to their columns
FIELD_COLUMNS = {
    "charging_station_id": "s.charging_station_id",
    "evse_id": "s.evse_id",
    "clearinghouse_id": "s.clearinghouse_id",
    "hub_operator_id": "s.hub_operator_id",
    "charging_pool_id": "s.charging_pool_id",
    "station_name": "s.station_name",
    "is_open_24_hours": "s.is_open_24_hours",
    "renewable_energy": "s.renewable_energy",
    "dynamic_info_available": "s.dynamic_info_available",
    "energy_source": "s.energy_source",
    "suboperator_name": "s.suboperator_name",
    "hardware_manufacturer": "s.hardware_manufacturer",
    "delta_type": "s.delta_type",
    "status": "s.status",
    "city": "a.city",
    "country": "a.country",
    "postal_code": "a.postal_code",
    "region": "a.region",
}


def _sql_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def _json_list(values: list | None) -> str | None:
    if values is None:
        return None
    return json.dumps([_sql_value(v) for v in values])


def _optional_bool(value: int | None) -> bool | None:
    return None if value is None else bool(value)


class ChargingStationRepository(BaseRepository):
    """Handles database operations for cached charging stations."""

    async def upsert(self, station: ChargingStation) -> ChargingStation:
        """Insert or replace a station and its child records."""
        await self._write(station)
        await self.conn.commit()
        return station

    async def upsert_many(self, stations: list[ChargingStation], commit: bool = True) -> int:
        """
        Insert or replace many stations in one transaction.

        With commit=False the writes stay pending and the caller commits or
        rolls back.
        """
        try:
            for station in stations:
                await self._write(station)
        except Exception:
            if commit:
                await self.conn.rollback()
            raise

        if commit:
            await self.conn.commit()
        return len(stations)

    async def _write(self, station: ChargingStation) -> int:
        query = """
            INSERT INTO station (
                charging_station_id, evse_id, clearinghouse_id, hub_operator_id,
                charging_pool_id, station_name, coordinates, entrance_coordinates,
                is_open_24_hours, renewable_energy, dynamic_info_available, plugs,
                authentication_modes, payment_options, value_added_services,
                accessibility, accessibility_location, calibration_law_data_availability,
                hotline_phone_number, location_reference, energy_source,
                environmental_impact, location_image, suboperator_name,
                hardware_manufacturer, additional_info, max_capacity,
                dynamic_power_level, delta_type, last_update, status, updated_at
            ) VALUES (
                ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?,
                ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP
            )
            ON CONFLICT(charging_station_id) DO UPDATE SET
                evse_id = excluded.evse_id,
                clearinghouse_id = excluded.clearinghouse_id,
                hub_operator_id = excluded.hub_operator_id,
                charging_pool_id = excluded.charging_pool_id,
                station_name = excluded.station_name,
                coordinates = excluded.coordinates,
                entrance_coordinates = excluded.entrance_coordinates,
                is_open_24_hours = excluded.is_open_24_hours,
                renewable_energy = excluded.renewable_energy,
                dynamic_info_available = excluded.dynamic_info_available,
                plugs = excluded.plugs,
                authentication_modes = excluded.authentication_modes,
                payment_options = excluded.payment_options,
                value_added_services = excluded.value_added_services,
                accessibility = excluded.accessibility,
                accessibility_location = excluded.accessibility_location,
                calibration_law_data_availability = excluded.calibration_law_data_availability,
                hotline_phone_number = excluded.hotline_phone_number,
                location_reference = excluded.location_reference,
                energy_source = excluded.energy_source,
                environmental_impact = excluded.environmental_impact,
                location_image = excluded.location_image,
                suboperator_name = excluded.suboperator_name,
                hardware_manufacturer = excluded.hardware_manufacturer,
                additional_info = excluded.additional_info,
                max_capacity = excluded.max_capacity,
                dynamic_power_level = excluded.dynamic_power_level,
                delta_type = excluded.delta_type,
                last_update = excluded.last_update,
                status = excluded.status,
                updated_at = CURRENT_TIMESTAMP
            RETURNING id
        """

        cursor = await self._execute(
            query,
            (
                station.charging_station_id,
                station.evse_id,
                station.clearinghouse_id,
                station.hub_operator_id,
                station.charging_pool_id,
                station.station_name,
                station.geo_coordinates.google,
                station.geo_charging_point_entrance.google,
                _sql_value(station.is_open_24_hours),
                _sql_value(station.renewable_energy),
                station.dynamic_info_available.value,
                _json_list(station.plugs),
                _json_list(station.authentication_modes),
                _json_list(station.payment_options),
                _json_list(station.value_added_services),
                station.accessibility,
                station.accessibility_location,
                station.calibration_law_data_availability,
                station.hotline_phone_number,
                station.charging_station_location_reference,
                station.energy_source,
                station.environmental_impact,
                station.location_image,
                station.suboperator_name,
                station.hardware_manufacturer,
                station.additional_info,
                station.max_capacity,
                _sql_value(station.dynamic_power_level),
                station.delta_type,
                station.last_update,
                _sql_value(station.status),
            ),
        )

        # Fetch BEFORE committing
        row = await cursor.fetchone()
        station_pk = row["id"]
        await self._replace_children(station_pk, station)
        return station_pk

    async def _replace_children(self, station_pk: int, station: ChargingStation) -> None:
        for table in ("station_address", "station_facility", "station_name", "station_opening_time"):
            await self._execute(f"DELETE FROM {table} WHERE station_id = ?", (station_pk,))

        address = station.address
        await self._execute(
            """
            INSERT INTO station_address (
                station_id, street, house_num, postal_code, city, region, country,
                time_zone, floor, parking_spot, parking_facility
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                station_pk,
                address.street,
                address.house_num,
                address.postal_code,
                address.city,
                address.region,
                address.country,
                address.time_zone,
                address.floor,
                address.parking_spot,
                _sql_value(address.parking_facility),
            ),
        )

        await self._executemany(
            """
            INSERT INTO station_facility (
                station_id, position, power, amperage, voltage, power_type
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (station_pk, i, f.power, f.amperage, f.voltage, f.power_type)
                for i, f in enumerate(station.charging_facilities)
            ],
        )

        await self._executemany(
            "INSERT INTO station_name (station_id, position, lang, value) VALUES (?, ?, ?, ?)",
            [(station_pk, i, n.lang, n.value) for i, n in enumerate(station.charging_station_names)],
        )

        await self._executemany(
            "INSERT INTO station_opening_time (station_id, position, day, periods) VALUES (?, ?, ?, ?)",
            [
                (
                    station_pk,
                    i,
                    ot.raw_day or ot.on.value,
                    json.dumps([{"begin": p.begin, "end": p.end} for p in ot.periods]),
                )
                for i, ot in enumerate(station.opening_times or [])
            ],
        )

    async def get_by_id(self, charging_station_id: str) -> ChargingStation | None:
        """Get station by its charging station ID."""
        return await self._first(
            _SELECT + " WHERE s.charging_station_id = ?", (charging_station_id,)
        )

    async def find_by_evse_id(self, evse_id: str) -> ChargingStation | None:
        """
        Get station by EVSE ID, the join key of the status feed.

        EVSE IDs are not unique in the cache; when several stations share one,
        the earliest stored station is returned.
        """
        return await self._first(_SELECT + " WHERE s.evse_id = ? ORDER BY s.id LIMIT 1", (evse_id,))

    async def find_by_field(self, field_name: str, value: Any) -> list[ChargingStation]:
        """Get all stations where a whitelisted field equals value."""
        column = FIELD_COLUMNS.get(field_name)
        if column is None:
            raise ValueError(f"Unsupported filter field: {field_name}")
        return await self._query(
            _SELECT + f" WHERE {column} = ?" + _ORDER_BY_LOCATION, (_sql_value(value),)
        )

    async def get_all(self) -> list[ChargingStation]:
        """Get all stations ordered by charging station ID."""
        return await self._query(_SELECT + " ORDER BY s.charging_station_id")

    async def find_by_city(self, city: str) -> list[ChargingStation]:
        return await self.find_by_field("city", city)

    async def find_by_country(self, country: str) -> list[ChargingStation]:
        return await self.find_by_field("country", country)

    async def find_by_postal_code(self, postal_code: str) -> list[ChargingStation]:
        return await self.find_by_field("postal_code", postal_code)

    async def find_by_plug_type(self, plug_type: str) -> list[ChargingStation]:
        """Get stations offering an exact plug type, e.g. "Type 2 Outlet"."""
        return await self._query(
            _SELECT
            + " WHERE EXISTS (SELECT 1 FROM json_each(s.plugs) WHERE json_each.value = ?)"
            + _ORDER_BY_LOCATION,
            (plug_type,),
        )

    async def find_24_hour(self) -> list[ChargingStation]:
        return await self.find_by_field("is_open_24_hours", True)

    async def find_renewable_energy(self) -> list[ChargingStation]:
        return await self.find_by_field("renewable_energy", True)

    async def delete_all(self, commit: bool = True) -> None:
        """Delete all stations; child rows go with them."""
        if commit:
            await self._execute_and_commit("DELETE FROM station")
        else:
            await self._execute("DELETE FROM station")

    async def count(self) -> int:
        row = await self._fetchone("SELECT COUNT(*) AS n FROM station")
        return row["n"]

    async def _first(self, query: str, params: tuple = ()) -> ChargingStation | None:
        stations = await self._query(query, params)
        return stations[0] if stations else None

    async def _query(self, query: str, params: tuple = ()) -> list[ChargingStation]:
        rows = await self._fetchall(query, params)
        if not rows:
            return []

        ids = [row["id"] for row in rows]
        facilities = defaultdict(list)
        for r in await self._fetchall_in(
            "SELECT * FROM station_facility WHERE station_id IN ({placeholders}) "
            "ORDER BY station_id, position",
            ids,
        ):
            facilities[r["station_id"]].append(
                ChargingFacility(
                    power=r["power"],
                    amperage=r["amperage"],
                    voltage=r["voltage"],
                    power_type=r["power_type"],
                )
            )

        names = defaultdict(list)
        for r in await self._fetchall_in(
            "SELECT * FROM station_name WHERE station_id IN ({placeholders}) "
            "ORDER BY station_id, position",
            ids,
        ):
            names[r["station_id"]].append(ChargingStationName(lang=r["lang"], value=r["value"]))

        opening_times = defaultdict(list)
        for r in await self._fetchall_in(
            "SELECT * FROM station_opening_time WHERE station_id IN ({placeholders}) "
            "ORDER BY station_id, position",
            ids,
        ):
            opening_times[r["station_id"]].append(
                OpeningTime(
                    on=decode_day(r["day"]),
                    periods=[Period(begin=p["begin"], end=p["end"]) for p in json.loads(r["periods"])],
                    raw_day=r["day"],
                )
            )

        return [
            self._row_to_model(
                row, facilities[row["id"]], names[row["id"]], opening_times[row["id"]]
            )
            for row in rows
        ]

    def _row_to_model(self, row, facilities, names, opening_times) -> ChargingStation:
        """Convert database row and its children to a ChargingStation model."""
        payment_options = row["payment_options"]
        if payment_options is not None:
            payment_options = [PaymentOption(v) for v in json.loads(payment_options)]

        value_added_services = row["value_added_services"]
        if value_added_services is not None:
            value_added_services = json.loads(value_added_services)

        return ChargingStation(
            charging_station_id=row["charging_station_id"],
            evse_id=row["evse_id"],
            address=Address(
                street=row["street"],
                city=row["city"],
                country=row["country"],
                house_num=row["house_num"],
                postal_code=row["postal_code"],
                region=row["region"],
                time_zone=row["time_zone"],
                floor=row["floor"],
                parking_spot=row["parking_spot"],
                parking_facility=_optional_bool(row["parking_facility"]),
            ),
            geo_coordinates=GeoCoordinates(google=row["coordinates"]),
            geo_charging_point_entrance=GeoCoordinates(google=row["entrance_coordinates"]),
            is_open_24_hours=bool(row["is_open_24_hours"]),
            renewable_energy=bool(row["renewable_energy"]),
            dynamic_info_available=DynamicInfoAvailable(row["dynamic_info_available"]),
            charging_facilities=facilities,
            authentication_modes=[
                AuthenticationMode(v) for v in json.loads(row["authentication_modes"])
            ],
            plugs=json.loads(row["plugs"]),
            charging_station_names=names,
            payment_options=payment_options,
            opening_times=opening_times or None,
            value_added_services=value_added_services,
            clearinghouse_id=row["clearinghouse_id"],
            hub_operator_id=row["hub_operator_id"],
            charging_pool_id=row["charging_pool_id"],
            accessibility=row["accessibility"],
            accessibility_location=row["accessibility_location"],
            calibration_law_data_availability=row["calibration_law_data_availability"],
            hotline_phone_number=row["hotline_phone_number"],
            charging_station_location_reference=row["location_reference"],
            energy_source=row["energy_source"],
            environmental_impact=row["environmental_impact"],
            location_image=row["location_image"],
            suboperator_name=row["suboperator_name"],
            hardware_manufacturer=row["hardware_manufacturer"],
            additional_info=row["additional_info"],
            max_capacity=row["max_capacity"],
            dynamic_power_level=_optional_bool(row["dynamic_power_level"]),
            delta_type=row["delta_type"],
            last_update=row["last_update"],
            status=EVSEStatus(row["status"]) if row["status"] is not None else None,
        )
