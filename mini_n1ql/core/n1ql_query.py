"""Query invocation adapter for N1QL-backed repository query methods."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional

from .contracts import OperationsPort, StatementSupplier
from .errors import UnsupportedQueryOperation
from .query_method import QueryMethod
from .query_request import QueryRequest, build_query
from .statements import Statement, statement_supplier_for

log = logging.getLogger(__name__)

UNSUPPORTED_SHAPE_MESSAGE = "Slice, page and modifying queries not yet supported"


class N1qlQuery:
    """Runs one repository query method against an operations port.

    Each `execute` call obtains the method's statement, turns the call
    arguments into a `QueryRequest`, runs it, and shapes the decoded rows as
    the method declared: a single entity (or `None`), a list, or a one-shot
    iterator. The adapter keeps no per-call state.
    """

    def __init__(
        self,
        query_method: QueryMethod,
        operations: OperationsPort,
        statement_supplier: StatementSupplier,
        *,
        strict_arguments: bool = False,
    ):
        """Create query adapter.

        Args:
            query_method: Descriptor of the declared method.
            operations: Port executing requests and decoding rows.
            statement_supplier: Strategy providing the method's statement.
            strict_arguments: Reject repeated options or plan arguments.
        """

        self._query_method = query_method
        self.operations = operations
        self.statement_supplier = statement_supplier
        self.strict_arguments = strict_arguments

    @classmethod
    def for_method(
        cls,
        fn: Callable[..., Any],
        operations: OperationsPort,
        *,
        entity_type: Any,
        query: Optional[str] = None,
        modifying: bool = False,
        strict_arguments: bool = False,
    ) -> N1qlQuery:
        """Register a declared function as a query method.

        The descriptor comes from the function's name and return annotation.
        The statement supplier is chosen once here: `query` text when given,
        otherwise derivation from the function name.
        """

        method = QueryMethod.from_function(fn, entity_type, modifying=modifying)
        supplier = statement_supplier_for(
            method, keyspace=operations.keyspace, query=query
        )
        return cls(method, operations, supplier, strict_arguments=strict_arguments)

    @property
    def query_method(self) -> QueryMethod:
        return self._query_method

    def execute(self, arguments: Iterable[Any] = ()) -> Any:
        """Run the query method with call-time arguments and shape the result.

        Raises:
            UnsupportedQueryOperation: For page, slice, and modifying methods.
        """

        statement = self.statement_supplier.supply()
        request = self.build_query(statement, arguments)
        return self.execute_depending_on_type(request)

    def build_query(self, statement: Statement, arguments: Iterable[Any]) -> QueryRequest:
        return build_query(statement, arguments, strict=self.strict_arguments)

    def execute_depending_on_type(self, request: QueryRequest) -> Any:
        method = self._query_method
        if method.is_page_query or method.is_slice_query or method.is_modifying_query:
            raise UnsupportedQueryOperation(UNSUPPORTED_SHAPE_MESSAGE)

        if method.is_collection_query:
            return self.execute_collection(request)
        if method.is_query_for_entity:
            return self.execute_entity(request)
        return self.execute_stream(request)

    def execute_collection(self, request: QueryRequest) -> List[Any]:
        log.debug(
            "Executing %s as %s request", self._query_method.name, request.mode.value
        )
        return list(self.operations.run(request, self._query_method.result_type))

    def execute_entity(self, request: QueryRequest) -> Any:
        rows = self.execute_collection(request)
        return rows[0] if rows else None

    def execute_stream(self, request: QueryRequest) -> Iterator[Any]:
        return iter(self.execute_collection(request))
