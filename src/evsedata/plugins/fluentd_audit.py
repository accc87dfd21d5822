"""Plugin for structured audit logging to Fluentd."""

import asyncio
from typing import Any

from fluent import sender

from .base import PluginContext, PluginHook, SyncPlugin


class FluentdAuditPlugin(SyncPlugin):
    """
    Sends structured audit records of every sync to Fluentd.

    Example log entry (tag "evse.sync.stations"):
    {
        "type": "evse",
        "feed": "stations",
        "fetched": 17342,
        "duplicates": 12,
        "stored": 17330
    }
    """

    def __init__(
        self,
        tag_prefix: str = "evse",
        host: str = "localhost",
        port: int = 24224,
        timeout: float = 3.0,
        buffer_overflow_handler: Any = None,
        nanosecond_precision: bool = False,
    ):
        """
        Initialize the Fluentd audit plugin.

        Args:
            tag_prefix: Prefix for Fluentd tags (default: "evse")
                       Tags will be: evse.sync.stations, evse.sync.statuses, evse.sync.error
            host: Fluentd server hostname (default: "localhost")
            port: Fluentd server port (default: 24224)
            timeout: Connection timeout in seconds (default: 3.0)
            buffer_overflow_handler: Handler for buffer overflow (default: None)
            nanosecond_precision: Use nanosecond precision timestamps (default: False)
        """
        super().__init__()
        self.tag_prefix = tag_prefix
        self.host = host
        self.port = port
        self.timeout = timeout
        self.buffer_overflow_handler = buffer_overflow_handler
        self.nanosecond_precision = nanosecond_precision
        self.sender = None

    def hooks(self) -> dict[PluginHook, str]:
        return {
            PluginHook.AFTER_STATION_SYNC: "log_station_sync",
            PluginHook.AFTER_STATUS_MERGE: "log_status_merge",
            PluginHook.ON_SYNC_ERROR: "log_sync_error",
        }

    async def initialize(self, manager):
        """Create the Fluentd sender when the plugin is registered."""
        try:
            self.sender = sender.FluentSender(
                self.tag_prefix,
                host=self.host,
                port=self.port,
                timeout=self.timeout,
                buffer_overflow_handler=self.buffer_overflow_handler,
                nanosecond_precision=self.nanosecond_precision,
            )
        except Exception as e:
            self.logger.error(f"Failed to initialize Fluentd sender: {e}", exc_info=True)
            self.sender = None

    async def cleanup(self, manager):
        """Close the Fluentd sender when the manager closes."""
        if self.sender:
            try:
                await asyncio.to_thread(self.sender.close)
            except Exception as e:
                self.logger.error(f"Error closing Fluentd sender: {e}", exc_info=True)

    async def _send_event(self, tag: str, data: dict):
        """Send an event to Fluentd without blocking the event loop."""
        if not self.sender:
            return

        try:
            await asyncio.to_thread(self.sender.emit, tag, data)
        except Exception as e:
            self.logger.error(f"Failed to send event to Fluentd (tag={tag}): {e}")

    async def log_station_sync(self, context: PluginContext):
        await self._send_event("sync.stations", {"type": "evse", "feed": "stations", **context.event_data})

    async def log_status_merge(self, context: PluginContext):
        data = {"type": "evse", "feed": "statuses", **context.event_data}
        report = context.result
        if report is not None:
            data["matched"] = report.matched
            data["unmatched"] = report.unmatched
        await self._send_event("sync.statuses", data)

    async def log_sync_error(self, context: PluginContext):
        await self._send_event("sync.error", {"type": "evse", **context.event_data})
