"""Derive N1QL statements from snake_case query method names.

Supported shape::

    <subject>[_first|_top<N>][_all][_by_<criteria>][_order_by_<orders>]

`criteria` are `_or_`-separated groups of `_and_`-separated predicates. Each
predicate names an entity attribute followed by an optional operator suffix
(`find_by_age_greater_than_and_name_starting_with`). Attribute names are
matched longest-first, so attributes that contain `and` or `or` still parse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .conditions import C, Condition, OrderBy, WhereExpression
from .dialect import N1qlDialect
from .metadata import EntityMetadata
from .query_builder import PlaceholderCounter, compile_limit, compile_order_by, compile_where

_SELECT_SUBJECTS = frozenset({"find", "get", "read", "query", "stream"})
_SUBJECTS = _SELECT_SUBJECTS | {"count", "exists"}

_METHOD_RE = re.compile(
    r"^(?P<subject>[a-z]+)"
    r"(?:_(?P<limit>first|top\d+))?"
    r"(?:_all)?"
    r"(?:_by_(?P<criteria>.+?))?"
    r"(?:_order_by_(?P<order>.+))?$"
)

ConditionFactory = Callable[[str, bool], Condition]

# Longest suffixes first so `is_not_null` wins over `is_not` and `is`.
_OPERATORS: List[Tuple[Tuple[str, ...], ConditionFactory]] = [
    (("greater", "than", "equal"), lambda col, raw: Condition(col, ">=", raw=raw)),
    (("less", "than", "equal"), lambda col, raw: Condition(col, "<=", raw=raw)),
    (("is", "not", "null"), lambda col, raw: Condition(col, "IS NOT NULL", is_unary=True, raw=raw)),
    (("greater", "than"), lambda col, raw: Condition(col, ">", raw=raw)),
    (("less", "than"), lambda col, raw: Condition(col, "<", raw=raw)),
    (("is", "null"), lambda col, raw: Condition(col, "IS NULL", is_unary=True, raw=raw)),
    (("is", "missing"), lambda col, raw: Condition(col, "IS MISSING", is_unary=True, raw=raw)),
    (("is", "not"), lambda col, raw: Condition(col, "<>", raw=raw)),
    (("not", "like"), lambda col, raw: Condition(col, "NOT LIKE", raw=raw)),
    (("not", "in"), lambda col, raw: Condition(col, "NOT IN", raw=raw)),
    (("starting", "with"), lambda col, raw: Condition(col, "STARTS_WITH", raw=raw)),
    (("ending", "with"), lambda col, raw: Condition(col, "ENDS_WITH", raw=raw)),
    (("containing",), lambda col, raw: Condition(col, "CONTAINS", raw=raw)),
    (("between",), lambda col, raw: Condition(col, "BETWEEN", raw=raw)),
    (("before",), lambda col, raw: Condition(col, "<", raw=raw)),
    (("after",), lambda col, raw: Condition(col, ">", raw=raw)),
    (("like",), lambda col, raw: Condition(col, "LIKE", raw=raw)),
    (("in",), lambda col, raw: Condition(col, "IN", raw=raw)),
    (("not",), lambda col, raw: Condition(col, "<>", raw=raw)),
    (("true",), lambda col, raw: Condition(col, "= TRUE", is_unary=True, raw=raw)),
    (("false",), lambda col, raw: Condition(col, "= FALSE", is_unary=True, raw=raw)),
    (("equals",), lambda col, raw: Condition(col, "=", raw=raw)),
    (("is",), lambda col, raw: Condition(col, "=", raw=raw)),
]


@dataclass(frozen=True)
class DerivedQuery:
    """Statement text derived from a method name plus what it expects."""

    method_name: str
    subject: str
    statement: str
    parameter_count: int
    limit: Optional[int] = None


def derive_query(
    method_name: str,
    metadata: EntityMetadata,
    keyspace: str,
    dialect: Optional[N1qlDialect] = None,
) -> DerivedQuery:
    """Parse a method name and render the matching N1QL statement.

    Raises:
        ValueError: If the name does not follow the grammar or references an
            unknown attribute.
    """

    dialect = dialect or N1qlDialect()
    match = _METHOD_RE.match(method_name)
    if match is None or match.group("subject") not in _SUBJECTS:
        raise ValueError(f"Cannot derive a query from method name {method_name!r}.")

    subject = match.group("subject")
    limit = _parse_limit(match.group("limit"))
    attributes = _attribute_targets(metadata, dialect)

    where = _parse_criteria(match.group("criteria"), attributes, method_name)
    order_by = _parse_order(match.group("order"), attributes, method_name)

    counter = PlaceholderCounter()
    predicate = compile_where(where, dialect, counter=counter)
    filter_sql = dialect.type_filter(metadata.document_type)
    if predicate:
        filter_sql = f"{filter_sql} AND {predicate}"

    if subject in _SELECT_SUBJECTS:
        head = dialect.select_entity(keyspace)
    else:
        projection = "COUNT(*)" if subject == "count" else "COUNT(*) > 0"
        head = f"SELECT RAW {projection} FROM {keyspace} AS {dialect.q(dialect.alias)}"

    statement = (
        f"{head} WHERE {filter_sql}"
        f"{compile_order_by(order_by, dialect)}"
        f"{compile_limit(limit)}"
    )
    return DerivedQuery(
        method_name=method_name,
        subject=subject,
        statement=statement,
        parameter_count=counter.used,
        limit=limit,
    )


def _parse_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    if raw == "first":
        return 1
    return int(raw[len("top"):])


def _attribute_targets(
    metadata: EntityMetadata, dialect: N1qlDialect
) -> Dict[str, Tuple[str, bool]]:
    """Map attribute names to `(target, raw)` pairs used in conditions."""

    targets: Dict[str, Tuple[str, bool]] = {
        name: (prop, False) for name, prop in metadata.properties.items()
    }
    targets[metadata.id_field] = (f"META({dialect.q(dialect.alias)}).id", True)
    return targets


def _match_attribute(
    tokens: Sequence[str], start: int, attributes: Dict[str, Tuple[str, bool]]
) -> Tuple[str, int]:
    for end in range(len(tokens), start, -1):
        candidate = "_".join(tokens[start:end])
        if candidate in attributes:
            return candidate, end
    raise ValueError(f"Unknown attribute at {'_'.join(tokens[start:])!r}.")


def _match_operator(
    tokens: Sequence[str], start: int
) -> Tuple[Optional[ConditionFactory], int]:
    for suffix, factory in _OPERATORS:
        end = start + len(suffix)
        if tuple(tokens[start:end]) == suffix and (
            end == len(tokens) or tokens[end] in ("and", "or")
        ):
            return factory, end
    return None, start


def _parse_criteria(
    raw: Optional[str],
    attributes: Dict[str, Tuple[str, bool]],
    method_name: str,
) -> Optional[WhereExpression]:
    if raw is None:
        return None

    tokens = raw.split("_")
    groups: List[List[WhereExpression]] = [[]]
    position = 0
    try:
        while position < len(tokens):
            attribute, position = _match_attribute(tokens, position, attributes)
            target, is_raw = attributes[attribute]
            factory, position = _match_operator(tokens, position)
            if factory is None:
                if position < len(tokens) and tokens[position] not in ("and", "or"):
                    raise ValueError(
                        f"Unknown operator at {'_'.join(tokens[position:])!r}."
                    )
                condition = Condition(target, "=", raw=is_raw)
            else:
                condition = factory(target, is_raw)
            groups[-1].append(condition)

            if position < len(tokens):
                if position + 1 >= len(tokens):
                    raise ValueError(f"Dangling {tokens[position]!r}.")
                if tokens[position] == "or":
                    groups.append([])
                position += 1
    except ValueError as exc:
        raise ValueError(f"Cannot derive a query from {method_name!r}: {exc}") from None

    parts = [group[0] if len(group) == 1 else C.and_(group) for group in groups]
    return parts[0] if len(parts) == 1 else C.or_(parts)


def _parse_order(
    raw: Optional[str],
    attributes: Dict[str, Tuple[str, bool]],
    method_name: str,
) -> List[OrderBy]:
    if raw is None:
        return []

    tokens = raw.split("_")
    order: List[OrderBy] = []
    position = 0
    try:
        while position < len(tokens):
            attribute, position = _match_attribute(tokens, position, attributes)
            target, is_raw = attributes[attribute]
            desc = False
            if position < len(tokens) and tokens[position] in ("asc", "desc"):
                desc = tokens[position] == "desc"
                position += 1
            order.append(OrderBy(target, desc=desc, raw=is_raw))

            if position < len(tokens):
                if tokens[position] != "and" or position + 1 >= len(tokens):
                    raise ValueError(
                        f"Unexpected {'_'.join(tokens[position:])!r} in ordering."
                    )
                position += 1
    except ValueError as exc:
        raise ValueError(f"Cannot derive a query from {method_name!r}: {exc}") from None
    return order
