"""Couchbase SDK adapters for the operations port."""

from .async_operations import AsyncCouchbaseOperations
from .operations import CouchbaseOperations
from .settings import CouchbaseSettings
from .translation import query_options_kwargs, request_statement

__all__ = [
    "AsyncCouchbaseOperations",
    "CouchbaseOperations",
    "CouchbaseSettings",
    "query_options_kwargs",
    "request_statement",
]
