"""High-level facade: fetch, decode and cache the EVSE feeds."""

import logging
from typing import Any, Protocol

import aiosqlite

from .decoding import deduplicate
from .logging_utils import log_error, log_sync_event
from .models import ChargingPointOperator, ChargingStation, OperatorStatus
from .plugins.base import PluginContext, PluginHook, SyncPlugin
from .repositories import ChargingPointOperatorRepository, ChargingStationRepository
from .sync import MergeReport, merge_statuses

logger = logging.getLogger(__name__)


class EVSEFetcher(Protocol):
    """Source of decoded feeds, EVSERestClient in production."""

    async def get_evse_data(self) -> list[ChargingStation]: ...

    async def get_evse_statuses(self) -> list[OperatorStatus]: ...


class EVSEManager:
    """
    Charging station queries backed by a persistent SQLite cache.

    The first call to get_charging_stations() fetches the data feed, drops
    duplicate stations (first occurrence wins) and stores the rest. Later
    calls are served from the cache until a refresh is forced.
    refresh_statuses() merges the live status feed into cached stations.

    Supports a plugin system for observing the sync lifecycle.
    """

    def __init__(
        self,
        fetcher: EVSEFetcher,
        db_connection: aiosqlite.Connection,
        plugins: list[SyncPlugin] | None = None,
    ):
        self.fetcher = fetcher
        self.conn = db_connection
        self.station_repo = ChargingStationRepository(db_connection)
        self.operator_repo = ChargingPointOperatorRepository(db_connection)

        self.plugins: list[SyncPlugin] = plugins or []
        self._plugin_hooks: dict[PluginHook, list[tuple[SyncPlugin, str]]] = {}
        self._register_plugins()

    async def get_charging_stations(self, force_refresh: bool = False) -> list[ChargingStation]:
        """Return cached stations, fetching the feed if the cache is empty or on force_refresh."""
        if not force_refresh:
            cached = await self.station_repo.get_all()
            if cached:
                return cached

        await self.sync_stations()
        return await self.station_repo.get_all()

    async def sync_stations(self) -> int:
        """Replace the cache with a fresh, deduplicated copy of the data feed."""
        event_data: dict[str, Any] = {"feed": "stations"}
        await self._execute_plugin_hooks(PluginHook.BEFORE_STATION_SYNC, event_data)

        try:
            stations = await self.fetcher.get_evse_data()
            unique = deduplicate(stations)
            stored = await self._replace_cache(unique)
        except Exception as e:
            await self._sync_failed(event_data, e)
            raise

        event_data.update(
            fetched=len(stations),
            duplicates=len(stations) - len(unique),
            stored=stored,
        )
        log_sync_event(logger, "station_sync", f"Cached {stored} charging stations", **event_data)
        await self._execute_plugin_hooks(PluginHook.AFTER_STATION_SYNC, event_data, stored)
        return stored

    async def refresh_statuses(self) -> MergeReport:
        """Fetch the status feed and apply it to cached stations."""
        event_data: dict[str, Any] = {"feed": "statuses"}
        await self._execute_plugin_hooks(PluginHook.BEFORE_STATUS_MERGE, event_data)

        try:
            statuses = await self.fetcher.get_evse_statuses()
            report = await merge_statuses(self.station_repo, statuses)
        except Exception as e:
            await self._sync_failed(event_data, e)
            raise

        event_data.update(operators=len(statuses), records=report.total)
        await self._execute_plugin_hooks(PluginHook.AFTER_STATUS_MERGE, event_data, report)
        return report

    async def _replace_cache(self, stations: list[ChargingStation]) -> int:
        """Swap cached stations and operators for a new set in one transaction."""
        try:
            await self.station_repo.delete_all(commit=False)
            await self.operator_repo.delete_all(commit=False)
            await self.operator_repo.load_defaults(commit=False)
            stored = await self.station_repo.upsert_many(stations, commit=False)
            await self.conn.commit()
        except Exception:
            # Nothing of a failed refresh may reach disk with a later commit
            await self.conn.rollback()
            raise
        return stored

    async def clear_cache(self):
        """Delete all cached stations and operators."""
        await self.station_repo.delete_all()
        await self.operator_repo.delete_all()
        log_sync_event(logger, "cache_cleared", "Station cache cleared")

    async def cached_station_count(self) -> int:
        return await self.station_repo.count()

    # Station queries

    async def find_by_id(self, charging_station_id: str) -> ChargingStation | None:
        return await self.station_repo.get_by_id(charging_station_id)

    async def find_by_evse_id(self, evse_id: str) -> ChargingStation | None:
        return await self.station_repo.find_by_evse_id(evse_id)

    async def find_by_city(self, city: str) -> list[ChargingStation]:
        return await self.station_repo.find_by_city(city)

    async def find_by_country(self, country: str) -> list[ChargingStation]:
        return await self.station_repo.find_by_country(country)

    async def find_by_postal_code(self, postal_code: str) -> list[ChargingStation]:
        return await self.station_repo.find_by_postal_code(postal_code)

    async def find_by_plug_type(self, plug_type: str) -> list[ChargingStation]:
        return await self.station_repo.find_by_plug_type(plug_type)

    async def find_24_hour_stations(self) -> list[ChargingStation]:
        return await self.station_repo.find_24_hour()

    async def find_renewable_energy_stations(self) -> list[ChargingStation]:
        return await self.station_repo.find_renewable_energy()

    # Operator queries

    async def load_operators(self) -> int:
        return await self.operator_repo.load_defaults()

    async def find_operator_by_id(self, operator_id: str) -> ChargingPointOperator | None:
        return await self.operator_repo.get_by_id(operator_id)

    async def find_operators_by_name(self, name: str) -> list[ChargingPointOperator]:
        return await self.operator_repo.find_by_name(name)

    async def find_operators_with_real_time_data(self) -> list[ChargingPointOperator]:
        return await self.operator_repo.find_with_real_time_data()

    async def find_operators_without_real_time_data(self) -> list[ChargingPointOperator]:
        return await self.operator_repo.find_without_real_time_data()

    async def find_all_operators(self) -> list[ChargingPointOperator]:
        return await self.operator_repo.get_all()

    async def count_operators(self) -> int:
        return await self.operator_repo.count()

    # Plugin lifecycle

    async def initialize_plugins(self):
        """Give every plugin a chance to set up (e.g. open senders)."""
        for plugin in self.plugins:
            await plugin.initialize(self)

    async def close(self):
        """Cleanup plugins."""
        for plugin in self.plugins:
            try:
                await plugin.cleanup(self)
            except Exception as e:
                log_error(
                    logger,
                    "plugin_cleanup_error",
                    f"Error cleaning up plugin {plugin.__class__.__name__}: {e}",
                    plugin=plugin.__class__.__name__,
                    exc_info=e,
                )

    async def _sync_failed(self, event_data: dict[str, Any], error: Exception):
        event_data["error_type"] = error.__class__.__name__
        event_data["error"] = str(error)
        log_error(
            logger,
            "sync_error",
            f"{event_data['feed'].capitalize()} sync failed: {error}",
            exc_info=error,
            feed=event_data["feed"],
        )
        await self._execute_plugin_hooks(PluginHook.ON_SYNC_ERROR, event_data)

    def _register_plugins(self):
        """Register all plugins and build hook mapping."""
        for plugin in self.plugins:
            try:
                hooks = plugin.hooks()
                for hook, method_name in hooks.items():
                    if hook not in self._plugin_hooks:
                        self._plugin_hooks[hook] = []
                    self._plugin_hooks[hook].append((plugin, method_name))
            except Exception as e:
                log_error(
                    logger,
                    "plugin_registration_error",
                    f"Failed to register plugin {plugin.__class__.__name__}: {e}",
                    plugin=plugin.__class__.__name__,
                    exc_info=e,
                )

    async def _execute_plugin_hooks(
        self,
        hook: PluginHook,
        event_data: dict[str, Any],
        result=None,
    ):
        """
        Execute all registered plugin hooks for a given lifecycle point.

        Args:
            hook: The hook point to execute
            event_data: Details of the sync step
            result: The step result (for AFTER hooks)
        """
        if hook not in self._plugin_hooks:
            return

        context = PluginContext(manager=self, event_data=event_data, result=result)

        for plugin, method_name in self._plugin_hooks[hook]:
            try:
                method = getattr(plugin, method_name)
                await method(context)
            except Exception as e:
                log_error(
                    logger,
                    "plugin_execution_error",
                    f"Error executing {plugin.__class__.__name__}.{method_name} for hook {hook.value}: {e}",
                    plugin=plugin.__class__.__name__,
                    hook=hook.value,
                    method=method_name,
                    exc_info=e,
                )
