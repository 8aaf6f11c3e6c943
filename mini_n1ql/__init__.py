"""mini_n1ql: repository query methods executed as N1QL requests."""

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .ports import AsyncCouchbaseOperations, CouchbaseOperations, CouchbaseSettings

__all__ = [
    *_core_all,
    "CouchbaseOperations",
    "AsyncCouchbaseOperations",
    "CouchbaseSettings",
]
