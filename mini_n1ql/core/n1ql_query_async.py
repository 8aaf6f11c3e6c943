"""Async query invocation adapter for N1QL-backed repository query methods."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable, Iterable, List, Optional

from ._async_utils import _iterate, _maybe_await
from .contracts import AsyncOperationsPort, StatementSupplier
from .errors import UnsupportedQueryOperation
from .n1ql_query import UNSUPPORTED_SHAPE_MESSAGE
from .query_method import QueryMethod
from .query_request import QueryRequest, build_query
from .statements import Statement, statement_supplier_for

log = logging.getLogger(__name__)


class AsyncN1qlQuery:
    """Async counterpart of `N1qlQuery`.

    Stream-shaped methods return a one-shot async iterator over the rows
    fetched by the call.
    """

    def __init__(
        self,
        query_method: QueryMethod,
        operations: AsyncOperationsPort,
        statement_supplier: StatementSupplier,
        *,
        strict_arguments: bool = False,
    ):
        self._query_method = query_method
        self.operations = operations
        self.statement_supplier = statement_supplier
        self.strict_arguments = strict_arguments

    @classmethod
    def for_method(
        cls,
        fn: Callable[..., Any],
        operations: AsyncOperationsPort,
        *,
        entity_type: Any,
        query: Optional[str] = None,
        modifying: bool = False,
        strict_arguments: bool = False,
    ) -> AsyncN1qlQuery:
        method = QueryMethod.from_function(fn, entity_type, modifying=modifying)
        supplier = statement_supplier_for(
            method, keyspace=operations.keyspace, query=query
        )
        return cls(method, operations, supplier, strict_arguments=strict_arguments)

    @property
    def query_method(self) -> QueryMethod:
        return self._query_method

    async def execute(self, arguments: Iterable[Any] = ()) -> Any:
        statement = self.statement_supplier.supply()
        request = self.build_query(statement, arguments)
        return await self.execute_depending_on_type(request)

    def build_query(self, statement: Statement, arguments: Iterable[Any]) -> QueryRequest:
        return build_query(statement, arguments, strict=self.strict_arguments)

    async def execute_depending_on_type(self, request: QueryRequest) -> Any:
        method = self._query_method
        if method.is_page_query or method.is_slice_query or method.is_modifying_query:
            raise UnsupportedQueryOperation(UNSUPPORTED_SHAPE_MESSAGE)

        if method.is_collection_query:
            return await self.execute_collection(request)
        if method.is_query_for_entity:
            return await self.execute_entity(request)
        return await self.execute_stream(request)

    async def execute_collection(self, request: QueryRequest) -> List[Any]:
        log.debug(
            "Executing %s as %s request", self._query_method.name, request.mode.value
        )
        rows = await _maybe_await(
            self.operations.run(request, self._query_method.result_type)
        )
        return list(rows)

    async def execute_entity(self, request: QueryRequest) -> Any:
        rows = await self.execute_collection(request)
        return rows[0] if rows else None

    async def execute_stream(self, request: QueryRequest) -> AsyncIterator[Any]:
        return _iterate(await self.execute_collection(request))
