"""Argument classification and query request construction.

Arguments of a query method call are split by runtime type:

- `QueryOptions` values become the request options.
- `PreparedPlan` values become the plan reference.
- Everything else is a positional bind value, kept in call order.

The request mode then follows a fixed precedence: a plan makes the request
prepared, otherwise bind values make it parametrized, otherwise it is simple.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional

from .errors import DuplicateArgumentError
from .options import PreparedPlan, QueryOptions
from .statements import Statement
from .types import BindValues, MaybeBindValues

log = logging.getLogger(__name__)


class QueryMode(str, Enum):
    """How a request reaches the query service."""

    PREPARED = "prepared"
    PARAMETRIZED = "parametrized"
    SIMPLE = "simple"


@dataclass(frozen=True)
class QueryRequest:
    """One unit of work for an operations port.

    Use the `simple`, `parametrized`, and `prepared` constructors; they keep
    the fields consistent with the mode.
    """

    mode: QueryMode
    statement: Optional[Statement]
    values: MaybeBindValues = None
    options: Optional[QueryOptions] = None
    plan: Optional[PreparedPlan] = None

    @classmethod
    def simple(
        cls, statement: Statement, options: Optional[QueryOptions] = None
    ) -> QueryRequest:
        """Build a request without bind values."""

        return cls(QueryMode.SIMPLE, statement, None, options, None)

    @classmethod
    def parametrized(
        cls,
        statement: Statement,
        values: Iterable[Any],
        options: Optional[QueryOptions] = None,
    ) -> QueryRequest:
        """Build a request with positional bind values.

        Raises:
            ValueError: If `values` is empty.
        """

        bound = tuple(values)
        if not bound:
            raise ValueError("A parametrized request requires at least one value.")
        return cls(QueryMode.PARAMETRIZED, statement, bound, options, None)

    @classmethod
    def prepared(
        cls,
        plan: PreparedPlan,
        values: Optional[Iterable[Any]] = None,
        options: Optional[QueryOptions] = None,
        statement: Optional[Statement] = None,
    ) -> QueryRequest:
        """Build a request executing a prepared plan.

        Empty `values` are stored as `None`.
        """

        bound = tuple(values) if values is not None else ()
        return cls(QueryMode.PREPARED, statement, bound or None, options, plan)


@dataclass(frozen=True)
class ClassifiedArguments:
    """Call arguments sorted into bind values, options, and plan."""

    values: BindValues = ()
    options: Optional[QueryOptions] = None
    plan: Optional[PreparedPlan] = None


def classify_arguments(
    arguments: Iterable[Any], *, strict: bool = False
) -> ClassifiedArguments:
    """Sort call arguments by runtime type, preserving bind value order.

    Args:
        arguments: Query method arguments in call order.
        strict: Reject a second `QueryOptions` or `PreparedPlan` instead of
            letting the later one replace the earlier one.

    Raises:
        DuplicateArgumentError: In strict mode, on a repeated options or plan
            argument.
    """

    values: List[Any] = []
    options: Optional[QueryOptions] = None
    plan: Optional[PreparedPlan] = None

    for position, argument in enumerate(arguments):
        if isinstance(argument, QueryOptions):
            if options is not None:
                _on_duplicate("QueryOptions", position, strict)
            options = argument
        elif isinstance(argument, PreparedPlan):
            if plan is not None:
                _on_duplicate("PreparedPlan", position, strict)
            plan = argument
        else:
            values.append(argument)

    return ClassifiedArguments(values=tuple(values), options=options, plan=plan)


def build_query(
    statement: Statement, arguments: Iterable[Any], *, strict: bool = False
) -> QueryRequest:
    """Build the request for one invocation. Any argument list yields a request."""

    classified = classify_arguments(arguments, strict=strict)

    if classified.plan is not None:
        request = QueryRequest.prepared(
            classified.plan,
            classified.values,
            classified.options,
            statement=statement,
        )
    elif classified.values:
        request = QueryRequest.parametrized(statement, classified.values, classified.options)
    else:
        request = QueryRequest.simple(statement, classified.options)

    log.debug(
        "Built %s request with %d bind value(s)",
        request.mode.value,
        len(classified.values),
    )
    return request


def _on_duplicate(kind: str, position: int, strict: bool) -> None:
    if strict:
        raise DuplicateArgumentError(
            f"{kind} passed more than once (again at argument {position})."
        )
    log.warning(
        "%s at argument %d replaces an earlier %s argument", kind, position, kind
    )
