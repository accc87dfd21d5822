"""Feed decoder: the EVSEData envelope to a flat list of stations."""

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ..models import ChargingStation, OperatorStatus
from .errors import DecodeError, FieldCoercionError, MissingRequiredFieldError
from .station import decode_station
from .status import decode_operator_status

logger = logging.getLogger(__name__)

RECORDS_KEY = "EVSEData"
STATIONS_KEY = "EVSEDataRecord"
STATUSES_KEY = "EVSEStatuses"


@dataclass
class FeedDecodeResult:
    """Outcome of a collecting decode: good stations plus per-record failures."""

    stations: list[ChargingStation] = field(default_factory=list)
    failures: list[DecodeError] = field(default_factory=list)


def load_document(document: Any) -> Any:
    """Parse raw bytes or text into JSON, pass already parsed objects through."""
    if isinstance(document, (bytes, bytearray, str)):
        return json.loads(document)
    return document


def _envelope_list(document: Any, key: str) -> list[Any]:
    document = load_document(document)
    if not isinstance(document, dict):
        raise FieldCoercionError(key, document, "envelope object")
    if key not in document:
        raise MissingRequiredFieldError(key)
    items = document[key]
    if not isinstance(items, list):
        raise FieldCoercionError(key, items, "list")
    return items


def _iter_raw_stations(document: Any) -> Iterator[tuple[tuple[int, int], Any]]:
    """Yield ((record_index, station_index), raw_station), depth first."""
    for record_index, record in enumerate(_envelope_list(document, RECORDS_KEY)):
        if not isinstance(record, dict):
            raise FieldCoercionError(f"{RECORDS_KEY}[{record_index}]", record, "object")
        if STATIONS_KEY not in record:
            raise MissingRequiredFieldError(f"{RECORDS_KEY}[{record_index}].{STATIONS_KEY}")
        stations = record[STATIONS_KEY]
        if not isinstance(stations, list):
            raise FieldCoercionError(
                f"{RECORDS_KEY}[{record_index}].{STATIONS_KEY}", stations, "list"
            )
        for station_index, raw in enumerate(stations):
            yield (record_index, station_index), raw


def decode_feed(document: Any) -> list[ChargingStation]:
    """
    Decode every station of the feed in order.

    Fail-fast: the first malformed station aborts the decode. The raised
    DecodeError carries the station's position in the feed.
    """
    stations = []
    for position, raw in _iter_raw_stations(document):
        try:
            stations.append(decode_station(raw))
        except DecodeError as e:
            e.position = position
            raise

    logger.debug(f"Decoded {len(stations)} stations from feed")
    return stations


def decode_feed_collecting(document: Any) -> FeedDecodeResult:
    """
    Decode every station, collecting per-record failures instead of raising.

    Envelope-level problems (missing EVSEData, wrong container types) still
    raise, only individual station records are skipped.
    """
    result = FeedDecodeResult()
    for position, raw in _iter_raw_stations(document):
        try:
            result.stations.append(decode_station(raw))
        except DecodeError as e:
            e.position = position
            result.failures.append(e)

    if result.failures:
        logger.warning(
            f"Skipped {len(result.failures)} malformed stations, decoded {len(result.stations)}"
        )
    return result


def decode_status_feed(document: Any) -> list[OperatorStatus]:
    """Decode the EVSEStatuses envelope into per-operator status lists."""
    return [decode_operator_status(raw) for raw in _envelope_list(document, STATUSES_KEY)]


def deduplicate(stations: Iterable[ChargingStation]) -> list[ChargingStation]:
    """Keep the first station seen for each charging_station_id, in order."""
    seen: set[str] = set()
    unique = []
    for station in stations:
        if station.charging_station_id in seen:
            continue
        seen.add(station.charging_station_id)
        unique.append(station)
    return unique
