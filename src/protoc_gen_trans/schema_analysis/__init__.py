"""Schema analysis exports."""

from .descriptor_mapping import (
    DEFAULT_ANNOTATION_EXTENSION,
    DescriptorMappingError,
    TranslationAnnotationReader,
    map_schema_files,
)
from .field_classifier import DEFAULT_WELL_KNOWN_PREFIX, SchemaValidationError, classify_fields
from .plan_builder import build_file_plans, build_message_plans
from .plan_models import ClassifiedField, FieldClassification, MessagePlan
from .schema_models import FieldDefinition, FieldKind, SchemaFile, TypeDefinition
from .type_index import TypeIndex, build_type_index

__all__ = [
    "ClassifiedField",
    "DEFAULT_ANNOTATION_EXTENSION",
    "DEFAULT_WELL_KNOWN_PREFIX",
    "DescriptorMappingError",
    "FieldClassification",
    "FieldDefinition",
    "FieldKind",
    "MessagePlan",
    "SchemaFile",
    "SchemaValidationError",
    "TranslationAnnotationReader",
    "TypeDefinition",
    "TypeIndex",
    "build_file_plans",
    "build_message_plans",
    "build_type_index",
    "classify_fields",
    "map_schema_files",
]
