"""Shared protobuf fixtures.

The fixtures describe the schema below with hand-built descriptors so tests do
not depend on protoc being installed::

    // trans/extensions.proto
    extend google.protobuf.FieldOptions { bool translated = 50000; }

    // transtest/messages.proto
    message TestMessage1 {
      message NestedMessage { string name1 = 1 [(trans.translated) = true]; }
      string id = 1;
      string name1 = 2 [(trans.translated) = true];
      string name2 = 3;
      string name3 = 4 [(trans.translated) = true];
      repeated string array1 = 5 [(trans.translated) = true];
      TestMessage2 msg1 = 6;
      NestedMessage msg2 = 7;
      map<string, TestMessage3> message_map = 8;
      map<string, int32> scalar_map = 9;
      google.protobuf.Timestamp updated_at = 10;
    }
    message TestMessage2 {
      string name1 = 1 [(trans.translated) = true];
      string name2 = 2;
      string name3 = 3 [(trans.translated) = true];
      repeated string array1 = 4 [(trans.translated) = true];
      repeated TestMessage2 recursive_msg_array1 = 5;
    }
    message TestMessage3 {
      string name1 = 1 [(trans.translated) = true];
      string name2 = 2;
    }
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, timestamp_pb2
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
)

TRANSLATED_FIELD_NUMBER = 50000

_STRING = FieldDescriptorProto.TYPE_STRING
_MESSAGE = FieldDescriptorProto.TYPE_MESSAGE
_INT32 = FieldDescriptorProto.TYPE_INT32
_BOOL = FieldDescriptorProto.TYPE_BOOL
_OPTIONAL = FieldDescriptorProto.LABEL_OPTIONAL
_REPEATED = FieldDescriptorProto.LABEL_REPEATED


def _varint(value: int) -> bytes:
    encoded = bytearray()
    while True:
        chunk = value & 0x7F
        value >>= 7
        if value:
            encoded.append(chunk | 0x80)
        else:
            encoded.append(chunk)
            return bytes(encoded)


def _annotation_options(value: bool) -> descriptor_pb2.FieldOptions:
    # The extension is unknown to the default pool, so it is kept as an unknown field.
    raw = _varint(TRANSLATED_FIELD_NUMBER << 3) + _varint(int(value))
    return descriptor_pb2.FieldOptions.FromString(raw)


def _add_field(
    message: DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    *,
    label: int = _OPTIONAL,
    type_name: str | None = None,
    translated: bool | None = None,
) -> None:
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name is not None:
        field.type_name = type_name
    if translated is not None:
        field.options.CopyFrom(_annotation_options(translated))


def _add_map_entry(message: DescriptorProto, name: str, value_type: int, value_type_name=None):
    entry = message.nested_type.add(name=name)
    entry.options.map_entry = True
    _add_field(entry, "key", 1, _STRING)
    _add_field(entry, "value", 2, value_type, type_name=value_type_name)
    return entry


def _well_known_file(module) -> FileDescriptorProto:
    file_descriptor = FileDescriptorProto()
    module.DESCRIPTOR.CopyToProto(file_descriptor)
    return file_descriptor


@pytest.fixture(scope="session")
def extension_file() -> FileDescriptorProto:
    file_descriptor = FileDescriptorProto(
        name="trans/extensions.proto",
        package="trans",
        syntax="proto3",
        dependency=["google/protobuf/descriptor.proto"],
    )
    file_descriptor.extension.add(
        name="translated",
        number=TRANSLATED_FIELD_NUMBER,
        type=_BOOL,
        label=_OPTIONAL,
        extendee=".google.protobuf.FieldOptions",
    )
    return file_descriptor


@pytest.fixture(scope="session")
def messages_file() -> FileDescriptorProto:
    file_descriptor = FileDescriptorProto(
        name="transtest/messages.proto",
        package="transtest",
        syntax="proto3",
        dependency=["trans/extensions.proto", "google/protobuf/timestamp.proto"],
    )

    message1 = file_descriptor.message_type.add(name="TestMessage1")
    nested = message1.nested_type.add(name="NestedMessage")
    _add_field(nested, "name1", 1, _STRING, translated=True)
    _add_map_entry(message1, "MessageMapEntry", _MESSAGE, ".transtest.TestMessage3")
    _add_map_entry(message1, "ScalarMapEntry", _INT32)
    _add_field(message1, "id", 1, _STRING)
    _add_field(message1, "name1", 2, _STRING, translated=True)
    _add_field(message1, "name2", 3, _STRING)
    _add_field(message1, "name3", 4, _STRING, translated=True)
    _add_field(message1, "array1", 5, _STRING, label=_REPEATED, translated=True)
    _add_field(message1, "msg1", 6, _MESSAGE, type_name=".transtest.TestMessage2")
    _add_field(message1, "msg2", 7, _MESSAGE, type_name=".transtest.TestMessage1.NestedMessage")
    _add_field(
        message1,
        "message_map",
        8,
        _MESSAGE,
        label=_REPEATED,
        type_name=".transtest.TestMessage1.MessageMapEntry",
    )
    _add_field(
        message1,
        "scalar_map",
        9,
        _MESSAGE,
        label=_REPEATED,
        type_name=".transtest.TestMessage1.ScalarMapEntry",
    )
    _add_field(message1, "updated_at", 10, _MESSAGE, type_name=".google.protobuf.Timestamp")

    message2 = file_descriptor.message_type.add(name="TestMessage2")
    _add_field(message2, "name1", 1, _STRING, translated=True)
    _add_field(message2, "name2", 2, _STRING)
    _add_field(message2, "name3", 3, _STRING, translated=True)
    _add_field(message2, "array1", 4, _STRING, label=_REPEATED, translated=True)
    _add_field(
        message2,
        "recursive_msg_array1",
        5,
        _MESSAGE,
        label=_REPEATED,
        type_name=".transtest.TestMessage2",
    )

    message3 = file_descriptor.message_type.add(name="TestMessage3")
    _add_field(message3, "name1", 1, _STRING, translated=True)
    _add_field(message3, "name2", 2, _STRING)
    return file_descriptor


@pytest.fixture(scope="session")
def proto_files(
    extension_file: FileDescriptorProto, messages_file: FileDescriptorProto
) -> tuple[FileDescriptorProto, ...]:
    """Request files in protoc order: dependencies first."""
    return (
        _well_known_file(descriptor_pb2),
        _well_known_file(timestamp_pb2),
        extension_file,
        messages_file,
    )


@pytest.fixture(scope="session")
def message_classes(proto_files: tuple[FileDescriptorProto, ...]) -> SimpleNamespace:
    pool = descriptor_pool.DescriptorPool()
    for file_descriptor in proto_files:
        pool.AddSerializedFile(file_descriptor.SerializeToString())

    def _message_class(name: str):
        return message_factory.GetMessageClass(pool.FindMessageTypeByName(name))

    return SimpleNamespace(
        TestMessage1=_message_class("transtest.TestMessage1"),
        NestedMessage=_message_class("transtest.TestMessage1.NestedMessage"),
        TestMessage2=_message_class("transtest.TestMessage2"),
        TestMessage3=_message_class("transtest.TestMessage3"),
    )
