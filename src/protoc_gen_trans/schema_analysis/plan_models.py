"""Analysis outcome entities shared with generated code."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FieldClassification(str, Enum):
    """How a field participates in translation traversal."""

    TRANSLATABLE_SCALAR = "translatable_scalar"
    COMPOSITE_SINGULAR = "composite_singular"
    COMPOSITE_ARRAY = "composite_array"
    COMPOSITE_MAP = "composite_map"

    @property
    def is_composite(self) -> bool:
        """Return True for classifications that hold child messages."""
        return self is not FieldClassification.TRANSLATABLE_SCALAR


@dataclass(frozen=True)
class ClassifiedField:
    """Field name paired with its translation classification."""

    name: str
    classification: FieldClassification
    repeated: bool = False


@dataclass(frozen=True)
class MessagePlan:
    """Ordered classified fields of one message type."""

    type_name: str
    fields: tuple[ClassifiedField, ...] = ()

    @property
    def runtime_name(self) -> str:
        """Return the type name as reported by protobuf descriptors at runtime."""
        return self.type_name.lstrip(".")

    @property
    def translatable_fields(self) -> tuple[ClassifiedField, ...]:
        return tuple(field for field in self.fields if not field.classification.is_composite)

    @property
    def composite_fields(self) -> tuple[ClassifiedField, ...]:
        return tuple(field for field in self.fields if field.classification.is_composite)
