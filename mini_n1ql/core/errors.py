"""Exceptions raised by the query invocation core."""

from __future__ import annotations


class UnsupportedQueryOperation(NotImplementedError):
    """Raised when a query method asks for a result shape that is not supported."""


class DuplicateArgumentError(ValueError):
    """Raised in strict mode when options or a plan are passed more than once."""
