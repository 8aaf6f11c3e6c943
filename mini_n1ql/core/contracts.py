"""Core port contracts used by query adapters and database ports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

from .options import PreparedPlan
from .types import Rows

if TYPE_CHECKING:
    from .query_request import QueryRequest
    from .statements import Statement


class StatementSupplier(Protocol):
    """Strategy that provides the statement for one query method."""

    def supply(self) -> Statement: ...


class OperationsPort(Protocol):
    """Database operations required by `N1qlQuery`.

    `run` must accept simple, parametrized, and prepared requests, decode each
    row into `target_type`, and raise its own errors unchanged.
    """

    keyspace: str

    def run(self, query: QueryRequest, target_type: Any) -> Rows: ...

    def prepare(self, statement: Statement, name: Optional[str] = None) -> PreparedPlan: ...


class AsyncOperationsPort(Protocol):
    """Async database operations required by `AsyncN1qlQuery`."""

    keyspace: str

    async def run(self, query: QueryRequest, target_type: Any) -> Rows: ...

    async def prepare(
        self, statement: Statement, name: Optional[str] = None
    ) -> PreparedPlan: ...
