"""Predicate primitives for derived N1QL statements.

Predicates never carry values. Each binary predicate renders positional
placeholders that the query method's call arguments fill at execution time.
"""

from __future__ import annotations

from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Any, Sequence

BINARY_OPS = frozenset(
    {"=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE", "IN", "NOT IN",
     "STARTS_WITH", "ENDS_WITH", "CONTAINS", "BETWEEN"}
)
UNARY_OPS = frozenset({"IS NULL", "IS NOT NULL", "IS MISSING", "= TRUE", "= FALSE"})


@dataclass(frozen=True)
class Condition:
    """One predicate on a document property.

    Attributes:
        col: Document property name.
        op: Operator (`=`, `IN`, `BETWEEN`, `IS NULL`, `STARTS_WITH`, ...).
        is_unary: Whether the operator takes no parameter.
        raw: `col` is a rendered expression such as `META(d).id`.
    """

    col: str
    op: str
    is_unary: bool = False
    raw: bool = False

    def __post_init__(self) -> None:
        allowed = UNARY_OPS if self.is_unary else BINARY_OPS
        if self.op not in allowed:
            kind = "unary" if self.is_unary else "binary"
            raise ValueError(f"Unsupported {kind} operator: {self.op}")


@dataclass(frozen=True)
class ConditionGroup:
    """Represents a grouped logical expression (`AND`/`OR`)."""

    operator: str
    items: tuple["WhereExpression", ...]


WhereExpression = Condition | ConditionGroup


class C:
    """Group factory methods."""

    @staticmethod
    def and_(*items: WhereExpression | Sequence[WhereExpression]) -> ConditionGroup:
        """Build a grouped `AND` expression."""

        return ConditionGroup(operator="AND", items=C._normalize_group_items(items))

    @staticmethod
    def or_(*items: WhereExpression | Sequence[WhereExpression]) -> ConditionGroup:
        """Build a grouped `OR` expression."""

        return ConditionGroup(operator="OR", items=C._normalize_group_items(items))

    @staticmethod
    def _normalize_group_items(
        items: Sequence[WhereExpression | Sequence[WhereExpression]],
    ) -> tuple[WhereExpression, ...]:
        normalized_input: Sequence[Any]
        if (
            len(items) == 1
            and isinstance(items[0], SequenceABC)
            and not isinstance(items[0], (str, bytes))
        ):
            normalized_input = items[0]
        else:
            normalized_input = items

        normalized: list[WhereExpression] = []
        for item in normalized_input:
            if not isinstance(item, (Condition, ConditionGroup)):
                raise TypeError("Expression must be Condition or ConditionGroup.")
            normalized.append(item)

        if not normalized:
            raise ValueError("Grouped condition must contain at least one expression.")
        return tuple(normalized)


@dataclass(frozen=True)
class OrderBy:
    """Represents one ordering expression."""

    col: str
    desc: bool = False
    raw: bool = False
