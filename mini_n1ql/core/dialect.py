"""N1QL quoting, placeholder, and projection rules."""

from __future__ import annotations

import json
from typing import Any, Optional

ID_ALIAS = "_ID"
CAS_ALIAS = "_CAS"


class N1qlDialect:
    """Dialect that renders identifiers, keyspaces, and literals for N1QL."""

    name: str = "n1ql"
    quote_char: str = "`"
    alias: str = "d"
    type_key: str = "type"

    def q(self, ident: str) -> str:
        """Quote an identifier with backticks."""

        if not ident:
            raise ValueError("Identifier must be a non-empty string.")
        if self.quote_char in ident:
            raise ValueError(f"Identifier must not contain {self.quote_char!r}: {ident!r}")
        return f"{self.quote_char}{ident}{self.quote_char}"

    def placeholder(self, index: int) -> str:
        """Return the positional placeholder for a 1-based parameter index."""

        if index <= 0:
            raise ValueError("Placeholder index must be >= 1")
        return f"${index}"

    def field(self, name: str, alias: Optional[str] = None) -> str:
        """Qualify a document property with the keyspace alias."""

        return f"{self.q(alias or self.alias)}.{self.q(name)}"

    def keyspace(
        self,
        bucket: str,
        scope: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> str:
        """Render `bucket` or `bucket.scope.collection`."""

        if (scope is None) != (collection is None):
            raise ValueError("scope and collection must be given together.")
        if scope is None:
            return self.q(bucket)
        return ".".join(self.q(part) for part in (bucket, scope, collection))  # type: ignore[misc]

    def literal(self, value: Any) -> str:
        """Render a JSON literal usable inside a statement."""

        return json.dumps(value)

    def meta_fields(self, alias: Optional[str] = None) -> str:
        """Projection returning document key, CAS, and body."""

        alias_sql = self.q(alias or self.alias)
        return (
            f"META({alias_sql}).id AS {ID_ALIAS}, "
            f"META({alias_sql}).cas AS {CAS_ALIAS}, {alias_sql}.*"
        )

    def type_filter(self, document_type: str, alias: Optional[str] = None) -> str:
        """Predicate restricting a keyspace to one entity type."""

        return f"{self.field(self.type_key, alias)} = {self.literal(document_type)}"

    def select_entity(self, keyspace: str, alias: Optional[str] = None) -> str:
        """`SELECT` head for loading full entities from a keyspace."""

        alias_sql = self.q(alias or self.alias)
        return f"SELECT {self.meta_fields(alias)} FROM {keyspace} AS {alias_sql}"
