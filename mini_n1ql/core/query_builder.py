"""N1QL fragment builders for filtering, sorting, and limiting.

Parameters are positional (`$1`, `$2`, ...) and numbered by one counter per
statement, so fragments compiled in sequence keep a single consistent
numbering.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .conditions import Condition, ConditionGroup, OrderBy, WhereExpression
from .dialect import N1qlDialect

WhereInput = Optional[Sequence[WhereExpression] | WhereExpression]


class PlaceholderCounter:
    """Hands out consecutive 1-based positional placeholders."""

    def __init__(self, start: int = 1) -> None:
        self._next = start

    @property
    def used(self) -> int:
        return self._next - 1

    def next(self, dialect: N1qlDialect) -> str:
        placeholder = dialect.placeholder(self._next)
        self._next += 1
        return placeholder


def compile_where(
    where: WhereInput,
    dialect: N1qlDialect,
    *,
    counter: Optional[PlaceholderCounter] = None,
    alias: Optional[str] = None,
) -> str:
    """Compile one or many expressions into a predicate (no `WHERE` keyword).

    Multiple expressions are combined using `AND`.

    Args:
        where: A single expression, a list of expressions, or `None`.
        dialect: Dialect used for property quoting and placeholders.
        counter: Shared placeholder counter; a fresh one starts at `$1`.
        alias: Keyspace alias used to qualify properties.

    Returns:
        The compiled predicate, or an empty string if no expression was given.
    """

    if where is None:
        return ""

    expressions = (
        [where] if isinstance(where, (Condition, ConditionGroup)) else list(where)
    )
    counter = counter or PlaceholderCounter()
    return " AND ".join(
        _compile_expression(item, dialect, counter, alias) for item in expressions
    )


def compile_order_by(
    order_by: Optional[Sequence[OrderBy]],
    dialect: N1qlDialect,
    *,
    alias: Optional[str] = None,
) -> str:
    """Compile `ORDER BY` clause from ordering inputs.

    Returns:
        N1QL `ORDER BY` fragment or an empty string.
    """

    if not order_by:
        return ""

    ordered = ", ".join(
        f"{_order_target(item, dialect, alias)} {'DESC' if item.desc else 'ASC'}"
        for item in order_by
    )
    return f" ORDER BY {ordered}"


def compile_limit(limit: Optional[int]) -> str:
    """Compile a literal `LIMIT` clause."""

    if limit is None:
        return ""
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return f" LIMIT {int(limit)}"


def _order_target(item: OrderBy, dialect: N1qlDialect, alias: Optional[str]) -> str:
    return item.col if item.raw else dialect.field(item.col, alias)


def _compile_expression(
    expr: WhereExpression,
    dialect: N1qlDialect,
    counter: PlaceholderCounter,
    alias: Optional[str],
) -> str:
    if isinstance(expr, Condition):
        return _compile_condition(expr, dialect, counter, alias)

    if isinstance(expr, ConditionGroup):
        clauses: List[str] = [
            _compile_expression(item, dialect, counter, alias) for item in expr.items
        ]
        return f"({f' {expr.operator} '.join(clauses)})"

    raise TypeError(f"Unsupported expression type: {type(expr).__name__}")


def _compile_condition(
    condition: Condition,
    dialect: N1qlDialect,
    counter: PlaceholderCounter,
    alias: Optional[str],
) -> str:
    col_sql = condition.col if condition.raw else dialect.field(condition.col, alias)

    if condition.is_unary:
        return f"{col_sql} {condition.op}"

    if condition.op == "BETWEEN":
        return f"{col_sql} BETWEEN {counter.next(dialect)} AND {counter.next(dialect)}"

    placeholder = counter.next(dialect)
    if condition.op == "STARTS_WITH":
        return f'{col_sql} LIKE {placeholder} || "%"'
    if condition.op == "ENDS_WITH":
        return f'{col_sql} LIKE "%" || {placeholder}'
    if condition.op == "CONTAINS":
        return f"CONTAINS({col_sql}, {placeholder})"
    return f"{col_sql} {condition.op} {placeholder}"
