"""Field classification service."""

from __future__ import annotations

import logging

from .plan_models import ClassifiedField, FieldClassification
from .schema_models import FieldDefinition, FieldKind, TypeDefinition
from .type_index import TypeIndex

logger = logging.getLogger(__name__)

DEFAULT_WELL_KNOWN_PREFIX = ".google.protobuf"

# Map-entry wrapper types declare the key first and the value second.
_MAP_VALUE_FIELD_POSITION = 1


class SchemaValidationError(Exception):
    """Raised when a schema uses the translatable annotation incorrectly."""

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(
            "'translated' option used with non-string field "
            f"(msg = {type_name}, field = {field_name})"
        )
        self.type_name = type_name
        self.field_name = field_name


def classify_fields(
    type_def: TypeDefinition,
    index: TypeIndex,
    *,
    type_name: str | None = None,
    well_known_prefix: str = DEFAULT_WELL_KNOWN_PREFIX,
) -> tuple[ClassifiedField, ...]:
    """Partition a message type's fields into translatable and composite fields.

    Args:
      type_def: Message type whose fields are classified in declaration order.
      index: Qualified-name index used to resolve message-typed references.
      type_name: Qualified name reported in validation errors; defaults to the
        simple name of ``type_def``.
      well_known_prefix: Qualified-name prefix of foreign types that can never
        carry annotations.

    Returns:
      Classified fields in declaration order. Fields that carry no translatable
      content are omitted.

    Raises:
      SchemaValidationError: If a non-string field is annotated translatable.
    """
    if type_def.is_map_entry:
        return ()

    owner_name = type_name or type_def.name
    classified: list[ClassifiedField] = []
    for field in type_def.fields:
        entry = _classify_field(owner_name, field, index, well_known_prefix)
        if entry is not None:
            classified.append(entry)
    return tuple(classified)


def _classify_field(
    owner_name: str,
    field: FieldDefinition,
    index: TypeIndex,
    well_known_prefix: str,
) -> ClassifiedField | None:
    if field.is_annotated_translatable:
        if field.kind is not FieldKind.STRING:
            raise SchemaValidationError(owner_name, field.name)
        return ClassifiedField(
            name=field.name,
            classification=FieldClassification.TRANSLATABLE_SCALAR,
            repeated=field.repeated,
        )

    if field.kind is not FieldKind.MESSAGE or _is_well_known(field, well_known_prefix):
        return None

    referenced = index.resolve(field.type_name)
    if referenced is None:
        logger.debug(
            "Type %s referenced by %s.%s is not indexed; treating it as a plain message.",
            field.type_name,
            owner_name,
            field.name,
        )
    elif referenced.is_map_entry:
        if not _has_traversable_values(referenced, well_known_prefix):
            logger.debug("Skipping map %s.%s without traversable values.", owner_name, field.name)
            return None
        return ClassifiedField(name=field.name, classification=FieldClassification.COMPOSITE_MAP)

    if field.repeated:
        return ClassifiedField(name=field.name, classification=FieldClassification.COMPOSITE_ARRAY)
    return ClassifiedField(name=field.name, classification=FieldClassification.COMPOSITE_SINGULAR)


def _is_well_known(field: FieldDefinition, well_known_prefix: str) -> bool:
    return bool(field.type_name) and str(field.type_name).startswith(well_known_prefix)


def _has_traversable_values(map_entry: TypeDefinition, well_known_prefix: str) -> bool:
    if len(map_entry.fields) <= _MAP_VALUE_FIELD_POSITION:
        return False
    value = map_entry.fields[_MAP_VALUE_FIELD_POSITION]
    return value.kind is FieldKind.MESSAGE and not _is_well_known(value, well_known_prefix)
