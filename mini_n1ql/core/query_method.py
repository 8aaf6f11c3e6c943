"""Query method descriptors and result shape classification."""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


class ResultShape(str, Enum):
    """Result shape declared by a query method."""

    ENTITY = "entity"
    COLLECTION = "collection"
    STREAM = "stream"
    PAGE = "page"
    SLICE = "slice"


class Slice(Generic[T]):
    """Return annotation marker for slice results."""


class Page(Slice[T]):
    """Return annotation marker for page results."""


_COLLECTION_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Set,
)
_STREAM_ORIGINS = (
    collections.abc.Iterator,
    collections.abc.Iterable,
    collections.abc.Generator,
    collections.abc.AsyncIterator,
    collections.abc.AsyncIterable,
    collections.abc.AsyncGenerator,
)


@dataclass(frozen=True)
class QueryMethod:
    """Immutable description of one declared repository query method.

    Attributes:
        name: Method name, also used for statement derivation.
        entity_type: Repository domain type.
        shape: Declared result shape.
        modifying: Whether the method writes data.
        result_type: Type each row is decoded into. Defaults to `entity_type`.
    """

    name: str
    entity_type: Any
    shape: ResultShape = ResultShape.COLLECTION
    modifying: bool = False
    result_type: Any = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("QueryMethod name must be a non-empty string.")
        object.__setattr__(self, "shape", ResultShape(self.shape))
        if self.result_type is None:
            object.__setattr__(self, "result_type", self.entity_type)

    @property
    def is_collection_query(self) -> bool:
        return self.shape is ResultShape.COLLECTION

    @property
    def is_query_for_entity(self) -> bool:
        return self.shape is ResultShape.ENTITY

    @property
    def is_stream_query(self) -> bool:
        return self.shape is ResultShape.STREAM

    @property
    def is_page_query(self) -> bool:
        return self.shape is ResultShape.PAGE

    @property
    def is_slice_query(self) -> bool:
        return self.shape is ResultShape.SLICE

    @property
    def is_modifying_query(self) -> bool:
        return self.modifying

    @classmethod
    def from_function(
        cls,
        fn: Callable[..., Any],
        entity_type: Any,
        *,
        modifying: bool = False,
    ) -> QueryMethod:
        """Describe a function from its name and return annotation.

        Functions without a return annotation are treated as collection
        queries of `entity_type`.
        """

        annotation = _return_annotation(fn)

        if annotation is inspect.Signature.empty:
            shape, result_type = ResultShape.COLLECTION, entity_type
        else:
            shape, result_type = classify_return(annotation, entity_type)

        return cls(
            name=fn.__name__,
            entity_type=entity_type,
            shape=shape,
            modifying=modifying,
            result_type=result_type,
        )


def classify_return(annotation: Any, entity_type: Any) -> tuple[ResultShape, Any]:
    """Map a return annotation to `(shape, row type)`."""

    annotation = _unwrap_optional(annotation)
    origin = typing.get_origin(annotation) or annotation
    args = typing.get_args(annotation)
    item_type = args[0] if args else entity_type

    if isinstance(origin, type) and issubclass(origin, Slice):
        shape = ResultShape.PAGE if issubclass(origin, Page) else ResultShape.SLICE
        return shape, item_type
    if origin in _COLLECTION_ORIGINS:
        return ResultShape.COLLECTION, item_type
    if origin in _STREAM_ORIGINS:
        return ResultShape.STREAM, item_type
    return ResultShape.ENTITY, annotation


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _return_annotation(fn: Callable[..., Any]) -> Any:
    """Resolved return annotation of `fn`, or `inspect.Signature.empty`.

    Raises:
        TypeError: If the return annotation names a type that cannot be
            resolved from the function's module globals.
    """

    try:
        hints = typing.get_type_hints(fn)
    except NameError as exc:
        annotation = getattr(fn, "__annotations__", {}).get(
            "return", inspect.Signature.empty
        )
        if _has_forward_refs(annotation):
            raise TypeError(
                f"Cannot resolve return annotation {annotation!r} of {fn.__name__}: {exc}"
            ) from exc
        return annotation
    return hints.get("return", inspect.Signature.empty)


def _has_forward_refs(annotation: Any) -> bool:
    if isinstance(annotation, (str, typing.ForwardRef)):
        return True
    return any(_has_forward_refs(arg) for arg in typing.get_args(annotation))
