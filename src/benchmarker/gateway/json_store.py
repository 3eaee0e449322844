"""File-backed DataGateway for offline use and tests.

Stores each table as a JSON array under .benchmarker/tables/ and plays
the backend's role for the ``start_paused_run`` procedure. Writes are
atomic (write to .tmp, then rename) to prevent corrupt table files.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from benchmarker.errors import GatewayError
from benchmarker.gateway.base import (
    PROCEDURE_START_PAUSED_RUN,
    TABLE_RUNS,
    DataGateway,
    Row,
)

if TYPE_CHECKING:
    from benchmarker.models.config import GatewayConfig


class JsonGateway(DataGateway):
    """Persist backend tables as JSON files.

    File layout:
        .benchmarker/
            tables/
                {table}.json    # list of row objects, insertion order
    """

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = storage_dir
        self.tables_dir = storage_dir / "tables"
        self._procedures: dict[str, Callable[[dict[str, Any]], Any]] = {
            PROCEDURE_START_PAUSED_RUN: self._start_paused_run,
        }

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig,
        project_root: Path,
        timeout: float,
    ) -> JsonGateway:
        return cls(project_root / config.storage_dir)

    async def query(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
    ) -> list[Row]:
        rows = self._load(table)
        if not filters:
            return rows
        return [
            row for row in rows
            if all(row.get(key) == value for key, value in filters.items())
        ]

    async def insert(self, table: str, row: Row) -> Row:
        rows = self._load(table)
        stored = {
            "id": str(uuid.uuid4()),
            "created_at": datetime.now(timezone.utc).isoformat(),
            **row,
        }
        rows.append(stored)
        self._save(table, rows)
        return dict(stored)

    async def update(self, table: str, row_id: str, patch: Row) -> None:
        rows = self._load(table)
        row = self._find(table, rows, row_id)
        row.update(patch)
        self._save(table, rows)

    async def delete(self, table: str, row_id: str) -> None:
        rows = self._load(table)
        row = self._find(table, rows, row_id)
        rows.remove(row)
        self._save(table, rows)

    async def call_procedure(self, name: str, params: dict[str, Any]) -> Any:
        procedure = self._procedures.get(name)
        if procedure is None:
            raise GatewayError(f"Unknown procedure '{name}'")
        return procedure(params)

    def _start_paused_run(self, params: dict[str, Any]) -> bool:
        """Move a paused run to running. Returns False if it was not paused."""
        rows = self._load(TABLE_RUNS)
        run = self._find(TABLE_RUNS, rows, str(params.get("run_id")))
        if run.get("state") != "paused":
            return False
        run["state"] = "running"
        self._save(TABLE_RUNS, rows)
        return True

    def _find(self, table: str, rows: list[Row], row_id: str) -> Row:
        for row in rows:
            if row.get("id") == row_id:
                return row
        raise GatewayError(f"No row with id '{row_id}' in {table}")

    def _table_path(self, table: str) -> Path:
        return self.tables_dir / f"{table}.json"

    def _load(self, table: str) -> list[Row]:
        path = self._table_path(table)
        if not path.exists():
            return []
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise GatewayError(f"Table file {path} is corrupt: {exc.msg}") from exc

    def _save(self, table: str, rows: list[Row]) -> None:
        self.tables_dir.mkdir(parents=True, exist_ok=True)
        path = self._table_path(table)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(
            json.dumps(rows, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        tmp_path.replace(path)
