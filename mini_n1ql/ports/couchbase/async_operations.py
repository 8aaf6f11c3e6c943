"""Async Couchbase adapter implementing the async operations port.

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
from .operations import _plan_from_rows
from .settings import CouchbaseSettings
from .translation import query_options_kwargs, request_statement

log = logging.getLogger(__name__)


class AsyncCouchbaseOperations:
    """Async operations port on an `acouchbase` cluster."""

    def __init__(
        self,
        cluster: Any,
        *,
        bucket: str,
        scope: Optional[str] = None,
        collection: Optional[str] = None,
        dialect: Optional[N1qlDialect] = None,
    ) -> None:
        self._options_cls, self._consistency_cls = load_query_types()
        self.cluster = cluster
        self.dialect = dialect or N1qlDialect()
        self.keyspace = self.dialect.keyspace(bucket, scope, collection)
        self._owns_cluster = False

    @classmethod
    async def connect(
        cls, settings: Optional[CouchbaseSettings] = None
    ) -> AsyncCouchbaseOperations:
        """Open an async cluster connection from settings."""

        settings = settings or CouchbaseSettings()
        Cluster, ClusterOptions, PasswordAuthenticator = load_connection_types(
            asynchronous=True
        )

        log.info(
            "Connecting to Couchbase at %s (bucket=%s)",
            settings.connection_string,
            settings.bucket,
        )
        cluster = await Cluster.connect(
            settings.connection_string,
            ClusterOptions(PasswordAuthenticator(settings.username, settings.password)),
        )
        try:
            await cluster.wait_until_ready(timedelta(seconds=settings.connect_timeout))
            operations = cls(
                cluster,
                bucket=settings.bucket,
                scope=settings.scope,
                collection=settings.collection,
            )
        except BaseException:
            await cluster.close()
            raise
        operations._owns_cluster = True
        return operations

    async def run(self, query: QueryRequest, target_type: Any) -> List[Any]:
        statement = request_statement(query, self.dialect)
        options = self._options_cls(
            **query_options_kwargs(query, consistency_factory=self._consistency_cls)
        )
        log.debug("Running %s N1QL request: %s", query.mode.value, statement)
        result = self.cluster.query(statement, options)
        return [row_to_entity(target_type, row) async for row in result.rows()]

    async def prepare(
        self, statement: Statement, name: Optional[str] = None
    ) -> PreparedPlan:
        plan_name = name or f"mini_n1ql_{uuid.uuid4().hex}"
        text = f"PREPARE {self.dialect.q(plan_name)} FROM {statement}"
        log.debug("Preparing N1QL statement as %s", plan_name)
        result = self.cluster.query(text, self._options_cls())
        rows = [row async for row in result.rows()]
        return _plan_from_rows(rows, plan_name, statement)

    async def close(self) -> None:
        if self._owns_cluster:
            self._owns_cluster = False
            await self.cluster.close()

    async def __aenter__(self) -> AsyncCouchbaseOperations:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()
