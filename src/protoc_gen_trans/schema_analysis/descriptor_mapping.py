"""Mapping from protobuf descriptors to the schema description model."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
)

from .schema_models import FieldDefinition, FieldKind, SchemaFile, TypeDefinition

logger = logging.getLogger(__name__)

DEFAULT_ANNOTATION_EXTENSION = "trans.translated"

_FIELD_OPTIONS_TYPE = "google.protobuf.FieldOptions"
_DESCRIPTOR_PROTO_NAME = "google/protobuf/descriptor.proto"


class DescriptorMappingError(Exception):
    """Raised when schema descriptors cannot be interpreted."""


class TranslationAnnotationReader:
    """Reads the translatable field annotation from field options.

    The annotation is a ``FieldOptions`` extension declared by one of the files
    being compiled, so it is not registered with the default descriptor pool.
    The reader loads the files into a private pool and re-parses each field's
    options with that pool's ``FieldOptions`` class.
    """

    def __init__(self, extension_name: str, options_class: type | None = None) -> None:
        self.extension_name = extension_name
        self._options_class = options_class

    @classmethod
    def from_file_descriptors(
        cls,
        file_descriptors: Sequence[FileDescriptorProto],
        extension_name: str = DEFAULT_ANNOTATION_EXTENSION,
    ) -> TranslationAnnotationReader:
        """Build a reader for the files of one generation run.

        Files must be ordered so that dependencies come first, as protoc emits them.
        """
        if extension_name not in _declared_extension_names(file_descriptors):
            logger.debug("Extension %s is not declared; no field is translatable.", extension_name)
            return cls(extension_name)

        pool = descriptor_pool.DescriptorPool()
        try:
            if not any(fd.name == _DESCRIPTOR_PROTO_NAME for fd in file_descriptors):
                pool.AddSerializedFile(_descriptor_proto_file().SerializeToString())
            for file_descriptor in file_descriptors:
                pool.AddSerializedFile(file_descriptor.SerializeToString())
            extension = pool.FindExtensionByName(extension_name)
        except (KeyError, TypeError, ValueError) as exc:
            raise DescriptorMappingError(
                f"Unable to load annotation extension {extension_name}: {exc}"
            ) from exc

        if extension.containing_type.full_name != _FIELD_OPTIONS_TYPE:
            raise DescriptorMappingError(
                f"Annotation extension {extension_name} must extend {_FIELD_OPTIONS_TYPE}."
            )
        message_factory.GetMessageClassesForFiles([extension.file.name], pool)
        options_class = message_factory.GetMessageClass(extension.containing_type)
        return cls(extension_name, options_class)

    def read(self, field: FieldDescriptorProto) -> bool | None:
        """Return the annotation value, or None when the field does not set it."""
        if self._options_class is None or not field.HasField("options"):
            return None
        options = self._options_class.FromString(field.options.SerializeToString())
        for descriptor, value in options.ListFields():
            if descriptor.full_name == self.extension_name:
                return bool(value)
        return None


def map_schema_files(
    file_descriptors: Iterable[FileDescriptorProto],
    annotation_reader: TranslationAnnotationReader,
) -> tuple[SchemaFile, ...]:
    """Convert file descriptors into immutable schema files."""
    return tuple(
        SchemaFile(
            name=file_descriptor.name,
            package=file_descriptor.package,
            message_types=tuple(
                _map_message(message, annotation_reader)
                for message in file_descriptor.message_type
            ),
            dependencies=tuple(file_descriptor.dependency),
        )
        for file_descriptor in file_descriptors
    )


def _map_message(message: DescriptorProto, reader: TranslationAnnotationReader) -> TypeDefinition:
    return TypeDefinition(
        name=message.name,
        fields=tuple(_map_field(field, reader) for field in message.field),
        nested_types=tuple(_map_message(nested, reader) for nested in message.nested_type),
        is_map_entry=message.options.map_entry,
    )


def _map_field(field: FieldDescriptorProto, reader: TranslationAnnotationReader) -> FieldDefinition:
    kind = _field_kind(field.type)
    return FieldDefinition(
        name=field.name,
        kind=kind,
        repeated=field.label == FieldDescriptorProto.LABEL_REPEATED,
        type_name=field.type_name if kind is FieldKind.MESSAGE else None,
        translatable=reader.read(field),
    )


def _field_kind(field_type: int) -> FieldKind:
    if field_type == FieldDescriptorProto.TYPE_STRING:
        return FieldKind.STRING
    if field_type in (FieldDescriptorProto.TYPE_MESSAGE, FieldDescriptorProto.TYPE_GROUP):
        return FieldKind.MESSAGE
    return FieldKind.OTHER_SCALAR


def _declared_extension_names(file_descriptors: Iterable[FileDescriptorProto]) -> set[str]:
    names: set[str] = set()
    for file_descriptor in file_descriptors:
        scope = file_descriptor.package
        names.update(_scoped(scope, extension.name) for extension in file_descriptor.extension)
        for message in file_descriptor.message_type:
            _collect_message_extensions(_scoped(scope, message.name), message, names)
    return names


def _collect_message_extensions(scope: str, message: DescriptorProto, names: set[str]) -> None:
    names.update(_scoped(scope, extension.name) for extension in message.extension)
    for nested in message.nested_type:
        _collect_message_extensions(_scoped(scope, nested.name), nested, names)


def _scoped(scope: str, name: str) -> str:
    return f"{scope}.{name}" if scope else name


def _descriptor_proto_file() -> FileDescriptorProto:
    file_descriptor = FileDescriptorProto()
    descriptor_pb2.DESCRIPTOR.CopyToProto(file_descriptor)
    return file_descriptor
