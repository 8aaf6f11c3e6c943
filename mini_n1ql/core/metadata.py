"""Entity metadata extraction used by statement generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Optional, Type, TypeVar

from .models import (
    DataclassModel,
    cas_field,
    document_type,
    id_field,
    model_fields,
    property_name,
)

T = TypeVar("T", bound=DataclassModel)


@dataclass(frozen=True)
class EntityMetadata(Generic[T]):
    """Normalized entity description used by statement suppliers."""

    model: Type[T]
    document_type: str
    id_field: str
    cas_field: Optional[str]
    properties: Dict[str, str]

    def property_for(self, attribute: str) -> str:
        """Document property name for a dataclass attribute.

        Raises:
            ValueError: If the attribute is not a field of the entity.
        """

        try:
            return self.properties[attribute]
        except KeyError:
            raise ValueError(
                f"{self.model.__name__} has no property {attribute!r}."
            ) from None


def build_entity_metadata(model: Type[T]) -> EntityMetadata[T]:
    """Build entity metadata from dataclass fields and field metadata.

    Args:
        model: Dataclass entity type.

    Returns:
        Immutable metadata object used by statement suppliers.

    Raises:
        ValueError: If the entity does not declare exactly one id field or
            declares several cas fields.
    """

    key = id_field(model)
    version = cas_field(model)
    properties = {
        field.name: property_name(field)
        for field in model_fields(model)
        if field is not key and field is not version
    }

    return EntityMetadata(
        model=model,
        document_type=document_type(model),
        id_field=key.name,
        cas_field=version.name if version else None,
        properties=properties,
    )
