"""Tests for the command line entry point."""

import json
import logging

import pytest
from conftest import make_raw_station

from evsedata.decoding import decode_station
from evsedata.main import main
from evsedata.repositories import ChargingStationRepository


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Keep the CLI's log file and root handlers out of other tests."""
    monkeypatch.chdir(tmp_path)
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


async def seed(db_connection, *stations):
    await ChargingStationRepository(db_connection).upsert_many(
        [decode_station(raw) for raw in stations]
    )


@pytest.mark.integration
class TestMain:
    """Test subcommands against a seeded database."""

    async def test_count(self, temp_db, db_connection, capsys):
        """Test the count subcommand."""
        await seed(db_connection, make_raw_station("S1", "E1"), make_raw_station("S2", "E2"))

        await main(["--db", temp_db.db_path, "count"])

        assert json.loads(capsys.readouterr().out) == {"stations": 2}

    async def test_find_by_city(self, temp_db, db_connection, capsys):
        """Test find by city prints matching stations as JSON."""
        await seed(db_connection, make_raw_station("S1", "E1"))

        await main(["--db", temp_db.db_path, "find", "--city", "bern"])

        result = json.loads(capsys.readouterr().out)
        assert [s["ChargingStationId"] for s in result] == ["S1"]

    async def test_find_by_unknown_evse_id(self, temp_db, capsys):
        """Test an unknown EVSE ID prints an empty list."""
        await main(["--db", temp_db.db_path, "find", "--evse-id", "CH*XYZ*E999"])

        assert json.loads(capsys.readouterr().out) == []

    async def test_operators_real_time_filter(self, temp_db, capsys):
        """Test operator filters combine."""
        await main(["--db", temp_db.db_path, "operators", "--no-real-time", "--name", "tesla"])

        result = json.loads(capsys.readouterr().out)
        assert [op["OperatorID"] for op in result] == ["CH*TES"]

    async def test_find_requires_criterion(self, temp_db):
        """Test find without a criterion exits."""
        with pytest.raises(SystemExit):
            await main(["--db", temp_db.db_path, "find"])

    @pytest.mark.parametrize("endpoint", ["localhost", ":24224", "localhost:port"])
    async def test_invalid_fluentd_endpoint(self, temp_db, endpoint):
        """Test a malformed Fluentd endpoint exits."""
        with pytest.raises(SystemExit):
            await main(["--db", temp_db.db_path, "--fluentd-endpoint", endpoint, "count"])
