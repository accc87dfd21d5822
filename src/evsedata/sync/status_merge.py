"""Merge a freshly decoded status feed into cached stations."""

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from ..logging_utils import log_sync_event
from ..models import ChargingStation, OperatorStatus

logger = logging.getLogger(__name__)


class StationStore(Protocol):
    """The part of the station cache the merge needs."""

    async def find_by_evse_id(self, evse_id: str) -> ChargingStation | None: ...

    async def upsert(self, station: ChargingStation) -> ChargingStation: ...


@dataclass
class MergeReport:
    """Counts of status records applied to or missing from the cache."""

    matched: int = 0
    unmatched: int = 0
    unmatched_evse_ids: list[str] = dataclasses.field(default_factory=list)

    @property
    def total(self) -> int:
        return self.matched + self.unmatched


async def merge_statuses(store: StationStore, statuses: Iterable[OperatorStatus]) -> MergeReport:
    """
    Apply every status record to the cached station with the same EVSE ID.

    Records without a cached station are skipped and reported, never created.
    Lookups and updates run one record at a time; a store error aborts the
    merge and propagates unchanged, leaving earlier updates in place.
    """
    report = MergeReport()
    for operator in statuses:
        for record in operator.records:
            station = await store.find_by_evse_id(record.evse_id)
            if station is None:
                report.unmatched += 1
                report.unmatched_evse_ids.append(record.evse_id)
                continue

            await store.upsert(dataclasses.replace(station, status=record.status))
            report.matched += 1

    log_sync_event(
        logger,
        "status_merge",
        f"Merged {report.matched} EVSE statuses, {report.unmatched} without cached station",
        matched=report.matched,
        unmatched=report.unmatched,
    )
    return report
