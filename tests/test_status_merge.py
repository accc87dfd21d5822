"""Tests for merging the status feed into cached stations."""

import sqlite3
from unittest.mock import AsyncMock

import pytest
from conftest import make_raw_station

from evsedata.decoding import decode_station, decode_status_feed
from evsedata.models import EVSEStatus, EVSEStatusRecord, OperatorStatus
from evsedata.repositories import ChargingStationRepository
from evsedata.sync import MergeReport, merge_statuses


@pytest.mark.unit
class TestMergeStatuses:
    """Test status merge against the SQLite store."""

    async def test_matching_and_unrelated_records(self, db_connection, sample_status_feed):
        """Test matching records update stations and others are counted only."""
        repo = ChargingStationRepository(db_connection)
        await repo.upsert(decode_station(make_raw_station("CH*ABC*S1", "CH*ABC*E123")))

        report = await merge_statuses(repo, decode_status_feed(sample_status_feed))

        station = await repo.find_by_evse_id("CH*ABC*E123")
        assert station.status is EVSEStatus.OCCUPIED
        assert report.matched == 1
        assert report.unmatched == 1
        assert report.unmatched_evse_ids == ["CH*XYZ*E999"]
        # Unmatched records never create stations
        assert await repo.count() == 1
        assert await repo.find_by_evse_id("CH*XYZ*E999") is None

    async def test_status_update_keeps_station_data(self, db_connection, sample_status_feed):
        """Test a status update leaves the rest of the station untouched."""
        repo = ChargingStationRepository(db_connection)
        original = decode_station(make_raw_station("CH*ABC*S1", "CH*ABC*E123"))
        await repo.upsert(original)

        await merge_statuses(repo, decode_status_feed(sample_status_feed))

        station = await repo.get_by_id("CH*ABC*S1")
        assert station.station_name == original.station_name
        assert station.charging_facilities == original.charging_facilities
        assert station.opening_times == original.opening_times

    async def test_later_record_wins(self, db_connection):
        """Test the last record for an EVSE ID wins."""
        repo = ChargingStationRepository(db_connection)
        await repo.upsert(decode_station(make_raw_station("CH*ABC*S1", "CH*ABC*E123")))
        statuses = [
            OperatorStatus(
                "CH*ABC",
                "ABC",
                [
                    EVSEStatusRecord("CH*ABC*E123", EVSEStatus.OCCUPIED),
                    EVSEStatusRecord("CH*ABC*E123", EVSEStatus.AVAILABLE),
                ],
            )
        ]

        report = await merge_statuses(repo, statuses)

        assert report.matched == 2
        assert (await repo.find_by_evse_id("CH*ABC*E123")).status is EVSEStatus.AVAILABLE

    async def test_empty_status_feed(self, db_connection):
        """Test an empty status feed."""
        repo = ChargingStationRepository(db_connection)

        report = await merge_statuses(repo, [])

        assert report == MergeReport()
        assert report.total == 0

    async def test_store_fault_propagates(self):
        """Test a lookup failure aborts the merge."""
        store = AsyncMock()
        store.find_by_evse_id.side_effect = sqlite3.OperationalError("database is locked")
        statuses = [OperatorStatus("CH*ABC", "ABC", [EVSEStatusRecord("CH*ABC*E123", EVSEStatus.OCCUPIED)])]

        with pytest.raises(sqlite3.OperationalError):
            await merge_statuses(store, statuses)

        store.upsert.assert_not_called()

    async def test_fault_keeps_earlier_updates(self):
        """Test a write failure keeps updates made before it."""
        station = decode_station(make_raw_station("CH*ABC*S1", "CH*ABC*E1"))
        store = AsyncMock()
        store.find_by_evse_id.return_value = station
        store.upsert.side_effect = [station, sqlite3.OperationalError("disk I/O error")]
        statuses = [
            OperatorStatus(
                "CH*ABC",
                "ABC",
                [
                    EVSEStatusRecord("CH*ABC*E1", EVSEStatus.OCCUPIED),
                    EVSEStatusRecord("CH*ABC*E1", EVSEStatus.AVAILABLE),
                ],
            )
        ]

        with pytest.raises(sqlite3.OperationalError):
            await merge_statuses(store, statuses)

        assert store.upsert.await_count == 2
        first = store.upsert.await_args_list[0].args[0]
        assert first.status is EVSEStatus.OCCUPIED
