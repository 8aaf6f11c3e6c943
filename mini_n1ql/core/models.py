"""Entity utilities for dataclass validation and result row mapping."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import MISSING, Field, fields, is_dataclass
from typing import Any, ClassVar, List, Optional, Protocol, Type, TypeVar, get_origin

from .dialect import CAS_ALIAS, ID_ALIAS
from .types import RowMapping


class DataclassModel(Protocol):
    """Protocol for supported dataclass entity types."""

    __dataclass_fields__: ClassVar[dict[str, Any]]


T = TypeVar("T")

_PASSTHROUGH_TARGETS = (None, Any, object)


def require_dataclass_model(cls: Type[Any]) -> None:
    """Validate that a class is a dataclass entity."""

    if not (isinstance(cls, type) and is_dataclass(cls)):
        name = getattr(cls, "__name__", repr(cls))
        raise TypeError(f"{name} must be a dataclass.")


def document_type(model_or_cls: Any) -> str:
    """Resolve the type discriminator value stored in documents.

    Uses `__document_type__` override when present, otherwise lowercased class
    name.
    """

    cls = model_or_cls if isinstance(model_or_cls, type) else type(model_or_cls)
    name = getattr(cls, "__document_type__", None)
    return name if isinstance(name, str) and name else cls.__name__.lower()


def model_fields(cls: Type[DataclassModel]) -> List[Field[Any]]:
    """Return dataclass fields for an entity type."""

    require_dataclass_model(cls)
    return list(fields(cls))


def property_name(field: Field[Any]) -> str:
    """Document property name for a field (`metadata={'name': ...}` override)."""

    name = field.metadata.get("name")
    return name if isinstance(name, str) and name else field.name


def id_field(cls: Type[DataclassModel]) -> Field[Any]:
    """Return the document key field defined with `metadata={'id': True}`."""

    ids = [f for f in model_fields(cls) if f.metadata.get("id")]
    if len(ids) != 1:
        raise ValueError(
            f"{cls.__name__} must declare exactly one id field. "
            "Use field(metadata={'id': True})."
        )
    return ids[0]


def cas_field(cls: Type[DataclassModel]) -> Optional[Field[Any]]:
    """Return the CAS/version field defined with `metadata={'cas': True}`."""

    cas = [f for f in model_fields(cls) if f.metadata.get("cas")]
    if len(cas) > 1:
        raise ValueError(f"{cls.__name__} declares more than one cas field.")
    return cas[0] if cas else None


def row_to_entity(target_type: Any, row: Any) -> Any:
    """Map one query result row to the requested target type.

    Dataclass targets are populated from `_ID`, `_CAS`, and their mapped
    document properties; unknown keys are ignored and missing ones fall back
    to field defaults. Mapping or untyped targets receive the row unchanged.
    Scalar targets unwrap single-column rows such as `{"count": 3}`.
    """

    if _is_passthrough(target_type):
        return row

    if isinstance(target_type, type) and is_dataclass(target_type):
        if isinstance(row, target_type):
            return row
        if not isinstance(row, Mapping):
            raise TypeError(
                f"Cannot decode {type(row).__name__} row into {target_type.__name__}."
            )
        return _mapping_to_entity(target_type, row)

    if isinstance(row, Mapping) and len(row) == 1:
        (row,) = row.values()
    return row


def _mapping_to_entity(cls: Type[T], row: RowMapping) -> T:
    key_field = id_field(cls)  # type: ignore[arg-type]
    version_field = cas_field(cls)  # type: ignore[arg-type]
    kwargs: dict[str, Any] = {}

    for item in model_fields(cls):  # type: ignore[arg-type]
        if not item.init:
            continue
        if item is key_field and ID_ALIAS in row:
            kwargs[item.name] = row[ID_ALIAS]
        elif version_field is not None and item is version_field and CAS_ALIAS in row:
            kwargs[item.name] = row[CAS_ALIAS]
        elif property_name(item) in row:
            kwargs[item.name] = row[property_name(item)]
        elif item.default is MISSING and item.default_factory is MISSING:
            raise ValueError(
                f"Row is missing required property {property_name(item)!r} "
                f"for {cls.__name__}."
            )

    return cls(**kwargs)


def _is_passthrough(target_type: Any) -> bool:
    """Untyped and mapping targets, parametrized ones such as `Dict[str, Any]` included."""

    if target_type in _PASSTHROUGH_TARGETS:
        return True
    origin = get_origin(target_type) or target_type
    return isinstance(origin, type) and issubclass(origin, Mapping)
