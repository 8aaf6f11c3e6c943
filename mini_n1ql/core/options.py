"""Query execution options and prepared plan references.

Both types travel through a query method's argument list next to ordinary bind
values. `classify_arguments` recognizes them by type and keeps them out of the
positional parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class ScanConsistency(str, Enum):
    """Index scan consistency requested from the query service."""

    NOT_BOUNDED = "not_bounded"
    REQUEST_PLUS = "request_plus"


ScanConsistencyInput = str | ScanConsistency


@dataclass(frozen=True)
class QueryOptions:
    """Per-request execution settings passed as a query method argument.

    Attributes:
        scan_consistency: Index consistency level.
        timeout: Server-side request timeout in seconds.
        read_only: Reject statements that would modify data.
        adhoc: `False` lets the client prepare and cache the statement.
        client_context_id: Identifier echoed back by the server.
        max_parallelism: Upper bound for index scan parallelism.
        pipeline_batch: Items buffered between operators.
        pipeline_cap: Maximum number of items each operator may buffer.
        scan_cap: Maximum buffered channel size for index scans.
        scan_wait: Seconds the indexer may wait to catch up.
        metrics: Ask the server to return execution metrics.
        raw: Extra request body fields forwarded as-is. Stored read-only and
            left out of the hash.
    """

    scan_consistency: Optional[ScanConsistencyInput] = None
    timeout: Optional[float] = None
    read_only: Optional[bool] = None
    adhoc: Optional[bool] = None
    client_context_id: Optional[str] = None
    max_parallelism: Optional[int] = None
    pipeline_batch: Optional[int] = None
    pipeline_cap: Optional[int] = None
    scan_cap: Optional[int] = None
    scan_wait: Optional[float] = None
    metrics: Optional[bool] = None
    raw: Optional[Mapping[str, Any]] = field(default=None, hash=False)

    def __post_init__(self) -> None:
        if self.scan_consistency is not None:
            object.__setattr__(
                self,
                "scan_consistency",
                normalize_scan_consistency(self.scan_consistency),
            )
        for name in ("timeout", "scan_wait"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0")
        for name in ("max_parallelism", "pipeline_batch", "pipeline_cap", "scan_cap"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or value <= 0):
                raise ValueError(f"{name} must be a positive integer")
        if self.raw is not None:
            object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))


@dataclass(frozen=True)
class PreparedPlan:
    """Handle to a statement prepared on the query service.

    Attributes:
        name: Server-side name of the prepared statement.
        encoded_plan: Encoded plan returned by `PREPARE`, when available.
        statement: Original statement text, kept for diagnostics.
    """

    name: str
    encoded_plan: Optional[str] = None
    statement: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("PreparedPlan name must be a non-empty string.")


def normalize_scan_consistency(value: ScanConsistencyInput) -> ScanConsistency:
    """Normalize user input into a `ScanConsistency` value."""

    if isinstance(value, ScanConsistency):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in ScanConsistency._value2member_map_:
            return ScanConsistency(key)
        allowed = sorted(ScanConsistency._value2member_map_.keys())
        raise ValueError(f"Unsupported scan consistency: {value}. Supported: {allowed}")
    raise ValueError(f"Unsupported scan consistency type: {type(value).__name__}")
