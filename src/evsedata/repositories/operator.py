"""Repository for charging point operator operations."""

import json
from datetime import date

from ..models import ChargingPointOperator
from ..operators import KNOWN_OPERATORS
from .base import BaseRepository


class ChargingPointOperatorRepository(BaseRepository):
    """Handles database operations for the operator catalog."""

    async def upsert(self, operator: ChargingPointOperator) -> ChargingPointOperator:
        """Insert or update an operator."""
        await self._write(operator)
        await self.conn.commit()
        return operator

    async def _write(self, operator: ChargingPointOperator) -> None:
        query = """
            INSERT INTO operator (
                operator_id, name, start_date, included_networks, with_real_time_data
            ) VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(operator_id) DO UPDATE SET
                name = excluded.name,
                start_date = excluded.start_date,
                included_networks = excluded.included_networks,
                with_real_time_data = excluded.with_real_time_data
        """
        await self._execute(
            query,
            (
                operator.operator_id,
                operator.name,
                operator.start_date.isoformat() if operator.start_date else None,
                json.dumps(operator.included_networks),
                1 if operator.with_real_time_data else 0,
            ),
        )

    async def load_defaults(self, commit: bool = True) -> int:
        """Store the known-operator catalog, return how many were new."""
        before = await self.count()
        for operator in KNOWN_OPERATORS:
            await self._write(operator)
        if commit:
            await self.conn.commit()
        return await self.count() - before

    async def get_by_id(self, operator_id: str) -> ChargingPointOperator | None:
        row = await self._fetchone("SELECT * FROM operator WHERE operator_id = ?", (operator_id,))
        if row:
            return self._row_to_model(row)
        return None

    async def find_by_name(self, name: str) -> list[ChargingPointOperator]:
        """Case-insensitive substring match on the operator name."""
        # Python lower() also folds the non-ASCII names SQLite's LOWER() leaves alone
        needle = name.lower()
        return [op for op in await self.get_all() if needle in op.name.lower()]

    async def find_with_real_time_data(self) -> list[ChargingPointOperator]:
        rows = await self._fetchall(
            "SELECT * FROM operator WHERE with_real_time_data = 1 ORDER BY name"
        )
        return [self._row_to_model(row) for row in rows]

    async def find_without_real_time_data(self) -> list[ChargingPointOperator]:
        rows = await self._fetchall(
            "SELECT * FROM operator WHERE with_real_time_data = 0 ORDER BY name"
        )
        return [self._row_to_model(row) for row in rows]

    async def get_all(self) -> list[ChargingPointOperator]:
        rows = await self._fetchall("SELECT * FROM operator ORDER BY name")
        return [self._row_to_model(row) for row in rows]

    async def delete_all(self, commit: bool = True) -> None:
        if commit:
            await self._execute_and_commit("DELETE FROM operator")
        else:
            await self._execute("DELETE FROM operator")

    async def count(self) -> int:
        row = await self._fetchone("SELECT COUNT(*) AS n FROM operator")
        return row["n"]

    def _row_to_model(self, row) -> ChargingPointOperator:
        """Convert database row to ChargingPointOperator model."""
        return ChargingPointOperator(
            operator_id=row["operator_id"],
            name=row["name"],
            start_date=date.fromisoformat(row["start_date"]) if row["start_date"] else None,
            included_networks=json.loads(row["included_networks"]),
            with_real_time_data=bool(row["with_real_time_data"]),
        )
