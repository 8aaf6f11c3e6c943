"""Lazy access to the optional Couchbase SDK."""

from __future__ import annotations

from typing import Any, Tuple

_INSTALL_HINT = (
    "couchbase is required for the Couchbase operations port. "
    "Install with `pip install couchbase` or `pip install mini-n1ql[couchbase]`."
)


def load_query_types() -> Tuple[Any, Any]:
    """Return the SDK `(QueryOptions, QueryScanConsistency)` classes."""

    try:
        from couchbase.n1ql import QueryScanConsistency  # type: ignore[import-not-found]
        from couchbase.options import QueryOptions  # type: ignore[import-not-found]
    except ImportError as exc:  # pragma: no cover - env dependent
        raise ImportError(_INSTALL_HINT) from exc
    return QueryOptions, QueryScanConsistency


def load_connection_types(asynchronous: bool = False) -> Tuple[Any, Any, Any]:
    """Return `(Cluster, ClusterOptions, PasswordAuthenticator)`."""

    try:
        from couchbase.auth import PasswordAuthenticator  # type: ignore[import-not-found]
        from couchbase.options import ClusterOptions  # type: ignore[import-not-found]

        if asynchronous:
            from acouchbase.cluster import Cluster  # type: ignore[import-not-found]
        else:
            from couchbase.cluster import Cluster  # type: ignore[import-not-found]
    except ImportError as exc:  # pragma: no cover - env dependent
        raise ImportError(_INSTALL_HINT) from exc
    return Cluster, ClusterOptions, PasswordAuthenticator
