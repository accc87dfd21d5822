"""Pytest configuration and fixtures."""

import asyncio
import copy
import tempfile
from pathlib import Path

import pytest

from evsedata.database import Database

BASE_STATION = {
    "ChargingStationId": "CH*ABC*S1",
    "EvseID": "CH*ABC*E123",
    "Address": {
        "Street": "Bahnhofplatz",
        "HouseNum": "1",
        "PostalCode": "3011",
        "City": "Bern",
        "Country": "CHE",
        "TimeZone": "Europe/Zurich",
    },
    "GeoCoordinates": {"Google": "46.9480 7.4391"},
    "GeoChargingPointEntrance": {"Google": "46.9481 7.4392"},
    "IsOpen24Hours": True,
    "RenewableEnergy": True,
    "DynamicInfoAvailable": "true",
    "ChargingFacilities": [
        {"power": "22", "powertype": "AC_3_PHASE", "Amperage": 32, "Voltage": "400"}
    ],
    "AuthenticationModes": ["NFC RFID Classic", "REMOTE"],
    "Plugs": ["Type 2 Outlet"],
    "ChargingStationNames": [{"lang": "de", "value": "Bern Hbf"}],
    "PaymentOptions": ["Contract"],
    "OpeningTimes": [{"on": "Everyday", "Period": {"begin": "00:00", "end": "23:59"}}],
    "ValueAddedServices": ["None"],
    "HotlinePhoneNumber": "+41800000000",
    "deltaType": "insert",
    "lastUpdate": "2025-09-30T02:15:16.965Z",
}


def make_raw_station(station_id="CH*ABC*S1", evse_id="CH*ABC*E123", **overrides):
    """Raw station object as published in the data feed."""
    raw = copy.deepcopy(BASE_STATION)
    raw["ChargingStationId"] = station_id
    raw["EvseID"] = evse_id
    raw.update(overrides)
    return raw


def make_feed(*wrappers):
    """EVSEData envelope, one wrapper per list of raw stations."""
    return {
        "EVSEData": [
            {"OperatorID": "CH*ABC", "OperatorName": "ABC Charging", "EVSEDataRecord": stations}
            for stations in wrappers
        ]
    }


def make_status_feed(*records, operator_id="CH*ABC", operator_name="ABC Charging"):
    """EVSEStatuses envelope for one operator, records as (evse_id, status) pairs."""
    return {
        "EVSEStatuses": [
            {
                "OperatorID": operator_id,
                "OperatorName": operator_name,
                "EVSEStatusRecord": [
                    {"EvseID": evse_id, "EVSEStatus": status} for evse_id, status in records
                ],
            }
        ]
    }


@pytest.fixture(scope="session")
def event_loop_policy():
    """Set event loop policy for async tests."""
    return asyncio.get_event_loop_policy()


@pytest.fixture
async def temp_db():
    """Create a temporary SQLite database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp:
        db_path = tmp.name

    # Initialize database with schema
    db = Database(db_path)
    await db.initialize_schema()

    yield db

    # Cleanup
    await db.disconnect()
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
async def db_connection(temp_db):
    """Provide a database connection for testing."""
    conn = await temp_db.connect()
    yield conn
    # Connection is cleaned up by temp_db fixture


@pytest.fixture
def raw_station():
    """A fully populated raw station object."""
    return make_raw_station()


@pytest.fixture
def station_factory():
    """Build raw station objects with overrides."""
    return make_raw_station


@pytest.fixture
def sample_feed():
    """Station feed with two wrappers and a duplicate station id."""
    return make_feed(
        [make_raw_station("A", "CH*ABC*EA")],
        [make_raw_station("A", "CH*ABC*EA2"), make_raw_station("B", "CH*ABC*EB")],
    )


@pytest.fixture
def sample_status_feed():
    """Status feed with one matching and one unrelated EVSE."""
    return make_status_feed(("CH*ABC*E123", "Occupied"), ("CH*XYZ*E999", "Available"))
