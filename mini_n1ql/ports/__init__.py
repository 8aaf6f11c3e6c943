"""Public port exports for concrete database adapters."""

from .couchbase import (
    AsyncCouchbaseOperations,
    CouchbaseOperations,
    CouchbaseSettings,
)

__all__ = [
    "CouchbaseOperations",
    "AsyncCouchbaseOperations",
    "CouchbaseSettings",
]
