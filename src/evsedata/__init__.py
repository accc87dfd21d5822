"""
evsedata - Swiss EV charging station open data client

Decodes the ich-tanke-strom.ch OICP feeds into typed models and caches
them in SQLite with aiosqlite.
"""

__version__ = "0.1.0"

from .client import EVSERestClient
from .database import Database
from .manager import EVSEManager

__all__ = ["Database", "EVSEManager", "EVSERestClient"]
