"""Statements and the strategies that supply them to query adapters.

A query method is bound to exactly one supplier when it is registered:

- `LiteralStatementSupplier` for fixed query text.
- `TemplateStatementSupplier` for query text with `#{...}` placeholders.
- `DerivedStatementSupplier` for statements derived from the method name.

Each supplier renders its statement once, at construction, and hands the same
immutable `Statement` to every invocation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional, Type

from .contracts import StatementSupplier
from .derivation import DerivedQuery, derive_query
from .dialect import N1qlDialect
from .metadata import EntityMetadata, build_entity_metadata

if TYPE_CHECKING:
    from .query_method import QueryMethod

_PLACEHOLDER_RE = re.compile(r"#\{\s*([a-z_]+)\s*\}")


@dataclass(frozen=True)
class Statement:
    """Query text bound to one repository query method."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError("Statement text must be a non-empty string.")

    def __str__(self) -> str:
        return self.text


class LiteralStatementSupplier:
    """Supplies fixed query text unchanged."""

    def __init__(self, text: str | Statement):
        self._statement = text if isinstance(text, Statement) else Statement(text)

    def supply(self) -> Statement:
        return self._statement


class TemplateStatementSupplier:
    """Supplies query text with entity placeholders expanded.

    Placeholders:
        `#{select_entity}`: `SELECT <meta fields> FROM <keyspace> AS <alias>`.
        `#{fields}`: document key, CAS, and body projection.
        `#{keyspace}`: quoted keyspace.
        `#{alias}`: quoted keyspace alias.
        `#{filter}`: predicate restricting rows to the entity type.
    """

    def __init__(
        self,
        template: str,
        entity: Type[object] | EntityMetadata,
        keyspace: str,
        dialect: Optional[N1qlDialect] = None,
    ):
        self.dialect = dialect or N1qlDialect()
        self.metadata = _as_metadata(entity)
        self.keyspace = keyspace
        self._statement = Statement(self._expand(template))

    def supply(self) -> Statement:
        return self._statement

    def _expand(self, template: str) -> str:
        d = self.dialect
        values: Dict[str, Callable[[], str]] = {
            "select_entity": lambda: d.select_entity(self.keyspace),
            "fields": d.meta_fields,
            "keyspace": lambda: self.keyspace,
            "alias": lambda: d.q(d.alias),
            "filter": lambda: d.type_filter(self.metadata.document_type),
        }

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in values:
                raise ValueError(
                    f"Unknown statement placeholder #{{{name}}}. "
                    f"Supported: {sorted(values)}"
                )
            return values[name]()

        return _PLACEHOLDER_RE.sub(replace, template)


class DerivedStatementSupplier:
    """Supplies a statement derived from a snake_case method name."""

    def __init__(
        self,
        method_name: str,
        entity: Type[object] | EntityMetadata,
        keyspace: str,
        dialect: Optional[N1qlDialect] = None,
    ):
        self.derived: DerivedQuery = derive_query(
            method_name, _as_metadata(entity), keyspace, dialect
        )
        self._statement = Statement(self.derived.statement)

    @property
    def parameter_count(self) -> int:
        return self.derived.parameter_count

    def supply(self) -> Statement:
        return self._statement


def has_placeholders(text: str) -> bool:
    """Return whether query text contains `#{...}` placeholders."""

    return _PLACEHOLDER_RE.search(text) is not None


def _as_metadata(entity: Type[object] | EntityMetadata) -> EntityMetadata:
    if isinstance(entity, EntityMetadata):
        return entity
    return build_entity_metadata(entity)  # type: ignore[arg-type]


def statement_supplier_for(
    method: QueryMethod,
    *,
    keyspace: str,
    query: Optional[str] = None,
    dialect: Optional[N1qlDialect] = None,
) -> StatementSupplier:
    """Pick the supplier strategy for a query method at registration time.

    Explicit query text becomes a template (or a literal when it has no
    placeholders); otherwise the statement is derived from the method name.
    """

    if query is not None:
        if has_placeholders(query):
            return TemplateStatementSupplier(query, method.entity_type, keyspace, dialect)
        return LiteralStatementSupplier(query)
    return DerivedStatementSupplier(method.name, method.entity_type, keyspace, dialect)
