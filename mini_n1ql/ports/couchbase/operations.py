"""Couchbase adapter implementing the operations port.

This adapter is optional and requires the `couchbase` package installed.
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Any, List, Optional

from ...core.dialect import N1qlDialect
from ...core.models import row_to_entity
from ...core.options import PreparedPlan
from ...core.query_request import QueryRequest
from ...core.statements import Statement
from ._sdk import load_connection_types, load_query_types
from .settings import CouchbaseSettings
from .translation import query_options_kwargs, request_statement

log = logging.getLogger(__name__)


class CouchbaseOperations:
    """Operations port that runs requests through a Couchbase SDK cluster."""

    def __init__(
        self,
        cluster: Any,
        *,
        bucket: str,
        scope: Optional[str] = None,
        collection: Optional[str] = None,
        dialect: Optional[N1qlDialect] = None,
    ) -> None:
        """Create operations port.

        Args:
            cluster: Connected `couchbase.cluster.Cluster`.
            bucket: Bucket holding the repository documents.
            scope: Scope name, given together with `collection`.
            collection: Collection name, given together with `scope`.
            dialect: N1QL dialect used for quoting.
        """

        self._options_cls, self._consistency_cls = load_query_types()
        self.cluster = cluster
        self.dialect = dialect or N1qlDialect()
        self.keyspace = self.dialect.keyspace(bucket, scope, collection)
        self._owns_cluster = False

    @classmethod
    def connect(cls, settings: Optional[CouchbaseSettings] = None) -> CouchbaseOperations:
        """Open a cluster connection from settings and wait until it is ready."""

        settings = settings or CouchbaseSettings()
        Cluster, ClusterOptions, PasswordAuthenticator = load_connection_types()

        log.info(
            "Connecting to Couchbase at %s (bucket=%s)",
            settings.connection_string,
            settings.bucket,
        )
        cluster = Cluster(
            settings.connection_string,
            ClusterOptions(PasswordAuthenticator(settings.username, settings.password)),
        )
        try:
            cluster.wait_until_ready(timedelta(seconds=settings.connect_timeout))
            operations = cls(
                cluster,
                bucket=settings.bucket,
                scope=settings.scope,
                collection=settings.collection,
            )
        except BaseException:
            cluster.close()
            raise
        operations._owns_cluster = True
        return operations

    def run(self, query: QueryRequest, target_type: Any) -> List[Any]:
        """Execute a request and decode every row into `target_type`."""

        statement = request_statement(query, self.dialect)
        options = self._options_cls(
            **query_options_kwargs(query, consistency_factory=self._consistency_cls)
        )
        log.debug("Running %s N1QL request: %s", query.mode.value, statement)
        result = self.cluster.query(statement, options)
        return [row_to_entity(target_type, row) for row in result.rows()]

    def prepare(self, statement: Statement, name: Optional[str] = None) -> PreparedPlan:
        """Prepare a statement on the query service and return its plan handle."""

        plan_name = name or f"mini_n1ql_{uuid.uuid4().hex}"
        text = f"PREPARE {self.dialect.q(plan_name)} FROM {statement}"
        log.debug("Preparing N1QL statement as %s", plan_name)
        rows = list(self.cluster.query(text, self._options_cls()).rows())
        return _plan_from_rows(rows, plan_name, statement)

    def close(self) -> None:
        """Close the cluster when this port opened it."""

        if self._owns_cluster:
            self._owns_cluster = False
            self.cluster.close()

    def __enter__(self) -> CouchbaseOperations:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


def _plan_from_rows(rows: List[Any], plan_name: str, statement: Statement) -> PreparedPlan:
    if not rows:
        raise RuntimeError(f"PREPARE returned no plan for {plan_name!r}.")
    row = rows[0]
    return PreparedPlan(
        name=row.get("name") or plan_name,
        encoded_plan=row.get("encoded_plan"),
        statement=str(statement),
    )
