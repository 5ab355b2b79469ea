"""Schema description entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FieldKind(str, Enum):
    """Declared kind of a schema field."""

    STRING = "string"
    MESSAGE = "message"
    OTHER_SCALAR = "other_scalar"


@dataclass(frozen=True)
class FieldDefinition:
    """One declared field of a message type."""

    name: str
    kind: FieldKind
    repeated: bool = False
    type_name: str | None = None
    translatable: bool | None = None

    @property
    def is_annotated_translatable(self) -> bool:
        """Return True when the field explicitly opts into translation."""
        return self.translatable is True


@dataclass(frozen=True)
class TypeDefinition:
    """Named message type with its fields and nested types."""

    name: str
    fields: tuple[FieldDefinition, ...] = ()
    nested_types: tuple[TypeDefinition, ...] = ()
    is_map_entry: bool = False


@dataclass(frozen=True)
class SchemaFile:
    """One schema file and the message types it declares."""

    name: str
    package: str
    message_types: tuple[TypeDefinition, ...] = ()
    dependencies: tuple[str, ...] = ()

    @property
    def qualified_prefix(self) -> str:
        """Return the dotted prefix shared by the file's top-level type names."""
        return f".{self.package}." if self.package else "."
