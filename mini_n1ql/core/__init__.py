"""Public core API for query methods, statements, and request building."""

from .conditions import C, Condition, ConditionGroup, OrderBy, WhereExpression
from .contracts import AsyncOperationsPort, OperationsPort, StatementSupplier
from .derivation import DerivedQuery, derive_query
from .dialect import CAS_ALIAS, ID_ALIAS, N1qlDialect
from .errors import DuplicateArgumentError, UnsupportedQueryOperation
from .metadata import EntityMetadata, build_entity_metadata
from .models import DataclassModel, document_type, row_to_entity
from .n1ql_query import N1qlQuery
from .n1ql_query_async import AsyncN1qlQuery
from .options import PreparedPlan, QueryOptions, ScanConsistency
from .query_builder import compile_limit, compile_order_by, compile_where
from .query_method import Page, QueryMethod, ResultShape, Slice
from .query_request import (
    ClassifiedArguments,
    QueryMode,
    QueryRequest,
    build_query,
    classify_arguments,
)
from .statements import (
    DerivedStatementSupplier,
    LiteralStatementSupplier,
    Statement,
    TemplateStatementSupplier,
    statement_supplier_for,
)

__all__ = [
    "C",
    "Condition",
    "ConditionGroup",
    "OrderBy",
    "WhereExpression",
    "OperationsPort",
    "AsyncOperationsPort",
    "StatementSupplier",
    "DerivedQuery",
    "derive_query",
    "N1qlDialect",
    "ID_ALIAS",
    "CAS_ALIAS",
    "UnsupportedQueryOperation",
    "DuplicateArgumentError",
    "EntityMetadata",
    "build_entity_metadata",
    "DataclassModel",
    "document_type",
    "row_to_entity",
    "N1qlQuery",
    "AsyncN1qlQuery",
    "PreparedPlan",
    "QueryOptions",
    "ScanConsistency",
    "compile_where",
    "compile_order_by",
    "compile_limit",
    "Page",
    "Slice",
    "QueryMethod",
    "ResultShape",
    "ClassifiedArguments",
    "QueryMode",
    "QueryRequest",
    "build_query",
    "classify_arguments",
    "Statement",
    "LiteralStatementSupplier",
    "TemplateStatementSupplier",
    "DerivedStatementSupplier",
    "statement_supplier_for",
]
