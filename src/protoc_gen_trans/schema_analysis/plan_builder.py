"""Schema plan building service."""

from __future__ import annotations

from collections.abc import MutableMapping

from .field_classifier import DEFAULT_WELL_KNOWN_PREFIX, classify_fields
from .plan_models import MessagePlan
from .schema_models import SchemaFile, TypeDefinition
from .type_index import TypeIndex, qualified_name


def build_message_plans(
    type_def: TypeDefinition,
    index: TypeIndex,
    *,
    prefix: str = ".",
    plans: MutableMapping[str, MessagePlan] | None = None,
    well_known_prefix: str = DEFAULT_WELL_KNOWN_PREFIX,
) -> MutableMapping[str, MessagePlan]:
    """Plan a message type and its nested types, keyed by qualified name.

    Nested types are planned before the enclosing type. Map-entry wrapper types
    and their nested types are skipped.
    """
    collected: MutableMapping[str, MessagePlan] = {} if plans is None else plans
    if type_def.is_map_entry:
        return collected

    name = qualified_name(prefix, type_def)
    for nested in type_def.nested_types:
        build_message_plans(
            nested,
            index,
            prefix=name + ".",
            plans=collected,
            well_known_prefix=well_known_prefix,
        )

    collected[name] = MessagePlan(
        type_name=name,
        fields=classify_fields(
            type_def, index, type_name=name, well_known_prefix=well_known_prefix
        ),
    )
    return collected


def build_file_plans(
    schema_file: SchemaFile,
    index: TypeIndex,
    *,
    well_known_prefix: str = DEFAULT_WELL_KNOWN_PREFIX,
) -> dict[str, MessagePlan]:
    """Plan every message type declared in one schema file."""
    plans: dict[str, MessagePlan] = {}
    for type_def in schema_file.message_types:
        build_message_plans(
            type_def,
            index,
            prefix=schema_file.qualified_prefix,
            plans=plans,
            well_known_prefix=well_known_prefix,
        )
    return plans
