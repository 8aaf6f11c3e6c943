"""Shared core type aliases used across contracts, adapters, and ports."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

BindValues = Tuple[Any, ...]
MaybeBindValues = Optional[BindValues]

RowMapping = Mapping[str, Any]
Rows = List[Any]
