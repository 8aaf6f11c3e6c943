"""Translate `QueryRequest` objects into Couchbase SDK call arguments."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from ...core.dialect import N1qlDialect
from ...core.query_request import QueryMode, QueryRequest

_PASSTHROUGH_OPTIONS = (
    "read_only",
    "adhoc",
    "client_context_id",
    "max_parallelism",
    "pipeline_batch",
    "pipeline_cap",
    "scan_cap",
    "metrics",
)


def request_statement(request: QueryRequest, dialect: Optional[N1qlDialect] = None) -> str:
    """Statement text sent for a request.

    Prepared requests execute the plan by name; the other modes send their
    statement unchanged.
    """

    if request.mode is QueryMode.PREPARED:
        if request.plan is None:
            raise ValueError("Prepared request has no plan.")
        return f"EXECUTE {(dialect or N1qlDialect()).q(request.plan.name)}"
    if request.statement is None:
        raise ValueError(f"{request.mode.value} request has no statement.")
    return str(request.statement)


def query_options_kwargs(
    request: QueryRequest,
    *,
    consistency_factory: Optional[Callable[[str], Any]] = None,
) -> Dict[str, Any]:
    """Keyword arguments for the SDK `QueryOptions` of a request.

    Args:
        request: Request to translate.
        consistency_factory: Converts a scan consistency value into the SDK
            enum. The plain string value is kept when omitted.
    """

    kwargs: Dict[str, Any] = {}
    if request.values:
        kwargs["positional_parameters"] = list(request.values)

    raw: Dict[str, Any] = {}
    if request.mode is QueryMode.PREPARED and request.plan is not None:
        if request.plan.encoded_plan:
            raw["encoded_plan"] = request.plan.encoded_plan

    options = request.options
    if options is not None:
        if options.scan_consistency is not None:
            value = options.scan_consistency.value  # type: ignore[union-attr]
            kwargs["scan_consistency"] = (
                consistency_factory(value) if consistency_factory else value
            )
        if options.timeout is not None:
            kwargs["timeout"] = timedelta(seconds=options.timeout)
        if options.scan_wait is not None:
            kwargs["scan_wait"] = timedelta(seconds=options.scan_wait)
        for name in _PASSTHROUGH_OPTIONS:
            value = getattr(options, name)
            if value is not None:
                kwargs[name] = value
        if options.raw:
            raw.update(options.raw)

    if raw:
        kwargs["raw"] = raw
    return kwargs
