"""Base repository class."""

from collections.abc import Iterable

import aiosqlite

# Stay well below SQLite's host parameter limit in IN (...) clauses
IN_CLAUSE_CHUNK = 500


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, connection: aiosqlite.Connection):
        self.conn = connection

    async def _execute(self, query: str, params: tuple = ()) -> aiosqlite.Cursor:
        """Execute a query and return cursor (caller must fetch before committing)."""
        return await self.conn.execute(query, params)

    async def _execute_and_commit(self, query: str, params: tuple = ()) -> None:
        """Execute a query and commit (for queries that don't return data)."""
        await self.conn.execute(query, params)
        await self.conn.commit()

    async def _executemany(self, query: str, rows: Iterable[tuple]) -> None:
        await self.conn.executemany(query, rows)

    async def _fetchone(self, query: str, params: tuple = ()) -> aiosqlite.Row | None:
        """Execute query and fetch one row."""
        cursor = await self.conn.execute(query, params)
        return await cursor.fetchone()

    async def _fetchall(self, query: str, params: tuple = ()) -> list[aiosqlite.Row]:
        """Execute query and fetch all rows."""
        cursor = await self.conn.execute(query, params)
        return await cursor.fetchall()

    async def _fetchall_in(self, query: str, ids: list) -> list[aiosqlite.Row]:
        """
        Run a query containing a single "{placeholders}" IN clause over ids,
        chunked to respect SQLite's parameter limit.
        """
        rows: list[aiosqlite.Row] = []
        for start in range(0, len(ids), IN_CLAUSE_CHUNK):
            chunk = ids[start : start + IN_CLAUSE_CHUNK]
            placeholders = ", ".join("?" for _ in chunk)
            rows.extend(await self._fetchall(query.format(placeholders=placeholders), tuple(chunk)))
        return rows
