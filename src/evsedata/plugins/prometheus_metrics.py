"""Plugin for Prometheus metrics instrumentation."""

import time

from prometheus_client import Counter, Gauge, Histogram

from .base import PluginContext, PluginHook, SyncPlugin

STATIONS = "stations"
STATUSES = "statuses"


class PrometheusMetricsPlugin(SyncPlugin):
    """
    Exposes Prometheus metrics for feed synchronization.

    This plugin tracks:
    - Sync latency and last successful sync per feed
    - Stations fetched, duplicates dropped and stations cached
    - Status records applied to or missing from the cache
    - Sync errors by feed and error type

    Metrics are exposed via the standard prometheus_client registry.
    Use prometheus_client.start_http_server() or generate_latest() to expose /metrics.
    """

    # Class-level metrics (shared across all plugin instances)

    evse_sync_seconds = Histogram(
        "evse_sync_seconds",
        "Feed synchronization duration in seconds",
        labelnames=["feed"],
    )

    evse_last_sync_ts = Gauge(
        "evse_last_sync_ts",
        "Unix timestamp of the last successful sync",
        labelnames=["feed"],
    )

    evse_stations_fetched = Gauge(
        "evse_stations_fetched",
        "Stations decoded from the last data feed, duplicates included",
    )

    evse_stations_duplicates = Gauge(
        "evse_stations_duplicates",
        "Duplicate station records dropped from the last data feed",
    )

    evse_stations_cached = Gauge(
        "evse_stations_cached",
        "Stations currently in the local cache",
    )

    evse_status_records_total = Counter(
        "evse_status_records_total",
        "Status records processed by the merge",
        labelnames=["result"],
    )

    evse_sync_errors_total = Counter(
        "evse_sync_errors_total",
        "Total number of failed syncs",
        labelnames=["feed", "error_type"],
    )

    def __init__(self):
        """Initialize the Prometheus metrics plugin."""
        super().__init__()
        self._start_times: dict[str, float] = {}

    def hooks(self) -> dict[PluginHook, str]:
        return {
            PluginHook.BEFORE_STATION_SYNC: "before_station_sync",
            PluginHook.AFTER_STATION_SYNC: "after_station_sync",
            PluginHook.BEFORE_STATUS_MERGE: "before_status_merge",
            PluginHook.AFTER_STATUS_MERGE: "after_status_merge",
            PluginHook.ON_SYNC_ERROR: "on_sync_error",
        }

    def _observe(self, feed: str):
        start = self._start_times.pop(feed, None)
        if start is not None:
            self.evse_sync_seconds.labels(feed=feed).observe(time.monotonic() - start)
        self.evse_last_sync_ts.labels(feed=feed).set(time.time())

    async def before_station_sync(self, context: PluginContext):
        self._start_times[STATIONS] = time.monotonic()

    async def after_station_sync(self, context: PluginContext):
        self._observe(STATIONS)
        data = context.event_data
        self.evse_stations_fetched.set(data.get("fetched", 0))
        self.evse_stations_duplicates.set(data.get("duplicates", 0))
        self.evse_stations_cached.set(data.get("stored", 0))

    async def before_status_merge(self, context: PluginContext):
        self._start_times[STATUSES] = time.monotonic()

    async def after_status_merge(self, context: PluginContext):
        self._observe(STATUSES)
        report = context.result
        if report is not None:
            self.evse_status_records_total.labels(result="matched").inc(report.matched)
            self.evse_status_records_total.labels(result="unmatched").inc(report.unmatched)

    async def on_sync_error(self, context: PluginContext):
        feed = context.event_data.get("feed", "unknown")
        self._start_times.pop(feed, None)
        self.evse_sync_errors_total.labels(
            feed=feed, error_type=context.event_data.get("error_type", "unknown")
        ).inc()
