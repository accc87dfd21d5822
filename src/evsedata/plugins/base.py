"""Base plugin infrastructure for EVSEManager."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..manager import EVSEManager

logger = logging.getLogger(__name__)


class PluginHook(str, Enum):
    """
    Available plugin hooks in the sync lifecycle.

    - BEFORE_*: Called before the manager fetches the feed
    - AFTER_*: Called after the sync completed successfully
    - ON_SYNC_ERROR: Called when a sync fails, before the error propagates
    """

    BEFORE_STATION_SYNC = "before_station_sync"
    AFTER_STATION_SYNC = "after_station_sync"

    BEFORE_STATUS_MERGE = "before_status_merge"
    AFTER_STATUS_MERGE = "after_status_merge"

    ON_SYNC_ERROR = "on_sync_error"


@dataclass
class PluginContext:
    """
    Context provided to plugin hooks.

    Contains:
    - manager: Reference to the EVSEManager running the sync
    - event_data: Details of the sync step (counts, durations, error)
    - result: The step result (only available in AFTER hooks)
    """

    manager: "EVSEManager"
    event_data: dict[str, Any]
    result: Any = None


class SyncPlugin(ABC):
    """
    Base class for EVSEManager plugins.

    To create a plugin:
    1. Subclass SyncPlugin
    2. Implement the `hooks()` method to register your hook handlers
    3. Implement async methods for each hook you want to handle

    Example:
        class MyPlugin(SyncPlugin):
            def hooks(self) -> dict[PluginHook, str]:
                return {
                    PluginHook.AFTER_STATION_SYNC: "on_synced"
                }

            async def on_synced(self, context: PluginContext):
                logger.info(f"Cached {context.event_data['stored']} stations")
    """

    def __init__(self):
        """Initialize the plugin."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def hooks(self) -> dict[PluginHook, str]:
        """
        Return a mapping of hooks to handler method names.

        Returns:
            Dictionary mapping PluginHook enum values to method names on this class.
        """

    async def initialize(self, manager: "EVSEManager"):
        """
        Called once when the plugin is registered with a manager.

        Args:
            manager: The manager instance this plugin is attached to
        """
        _ = manager

    async def cleanup(self, manager: "EVSEManager"):
        """
        Called when the manager is closed.

        Args:
            manager: The manager instance this plugin is attached to
        """
        _ = manager
