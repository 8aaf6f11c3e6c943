"""Internal helpers for the async query adapter."""

from __future__ import annotations

import inspect
from typing import Any, AsyncIterator, Iterable


async def _maybe_await(value: Any) -> Any:
    """Await awaitables and return non-awaitable values unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def _iterate(items: Iterable[Any]) -> AsyncIterator[Any]:
    """Expose an already fetched collection as a one-shot async iterator."""
    for item in items:
        yield item
