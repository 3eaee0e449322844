"""DataGateway ABC: the narrow interface to the backend store.

The backend is a relational store with row-level access control and one
remote procedure (``start_paused_run``). Everything the benchmarker
persists goes through these five operations; table layout lives in the
TABLE_* constants below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from benchmarker.models.config import GatewayConfig

TABLE_SCENARIOS = "benchmark_scenarios"
TABLE_REVIEWERS = "reviewers"
TABLE_RUNS = "runs"
TABLE_RESULTS = "results"
TABLE_USER_SECRETS = "user_secrets"
TABLE_REVIEW_DIMENSIONS = "review_dimensions"

PROCEDURE_START_PAUSED_RUN = "start_paused_run"

Row = dict[str, Any]


class DataGateway(ABC):
    """Abstract base class for backend stores.

    Every method is a coroutine; each call is a suspension point for the
    orchestrator. Implementations raise GatewayError on backend failure.
    Gateways are async context managers so connections are released.
    """

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig,
        project_root: Path,
        timeout: float,
    ) -> DataGateway:
        """Build a gateway from project configuration.

        The default ignores configuration; custom gateways referenced by
        dotted path may override this.
        """
        return cls()

    @abstractmethod
    async def query(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
    ) -> list[Row]:
        """Return rows of table whose columns equal every filter value."""
        ...

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row:
        """Insert a row and return it with server-assigned id and created_at."""
        ...

    @abstractmethod
    async def update(self, table: str, row_id: str, patch: Row) -> None:
        """Apply patch to the row with the given id."""
        ...

    @abstractmethod
    async def delete(self, table: str, row_id: str) -> None:
        """Delete the row with the given id."""
        ...

    @abstractmethod
    async def call_procedure(self, name: str, params: dict[str, Any]) -> Any:
        """Invoke a remote procedure and return its result."""
        ...

    async def aclose(self) -> None:
        """Release any held connections. Default is a no-op."""

    async def __aenter__(self) -> DataGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
