"""Fully-qualified type name index."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from .schema_models import SchemaFile, TypeDefinition

logger = logging.getLogger(__name__)


class TypeIndex(Mapping[str, TypeDefinition]):
    """Read-only lookup from dotted qualified name to type definition.

    Names carry a leading dot, matching the form protobuf uses in field
    ``type_name`` references: ``.pkg.Outer.Inner``, or ``.Outer`` when the
    package is empty.
    """

    def __init__(self, definitions: Mapping[str, TypeDefinition]) -> None:
        self._definitions = dict(definitions)

    def __getitem__(self, qualified_name: str) -> TypeDefinition:
        return self._definitions[qualified_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def resolve(self, qualified_name: str | None) -> TypeDefinition | None:
        """Return the definition for a type reference, or None when unknown."""
        if qualified_name is None:
            return None
        return self._definitions.get(qualified_name)


def build_type_index(schema_files: Iterable[SchemaFile]) -> TypeIndex:
    """Register every message type, nested ones included, under its qualified name.

    Duplicate qualified names overwrite earlier registrations (last write wins).
    """
    definitions: dict[str, TypeDefinition] = {}
    for schema_file in schema_files:
        for type_def in schema_file.message_types:
            _register(schema_file.qualified_prefix, type_def, definitions)
    return TypeIndex(definitions)


def qualified_name(prefix: str, type_def: TypeDefinition) -> str:
    """Join a dotted prefix (ending in a dot) with a type's simple name."""
    return prefix + type_def.name


def _register(
    prefix: str, type_def: TypeDefinition, definitions: dict[str, TypeDefinition]
) -> None:
    name = qualified_name(prefix, type_def)
    if name in definitions:
        # TODO: report conflicting definitions instead of overwriting once callers can act on it.
        logger.debug("Type %s registered twice; keeping the latest definition.", name)
    definitions[name] = type_def
    for nested in type_def.nested_types:
        _register(name + ".", nested, definitions)
