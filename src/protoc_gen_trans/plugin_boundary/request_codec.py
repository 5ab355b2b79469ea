"""protoc plugin request decoding and response encoding."""

from __future__ import annotations

from collections.abc import Iterable

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.descriptor_pb2 import FileDescriptorSet
from google.protobuf.message import DecodeError

from protoc_gen_trans.code_generation.module_renderer import GeneratedFile

from .generation_contracts import GenerationRequest


class RequestDecodeError(Exception):
    """Raised when encoded generation input cannot be parsed."""


def decode_generation_request(data: bytes) -> GenerationRequest:
    """Parse an encoded ``CodeGeneratorRequest``."""
    request = CodeGeneratorRequest()
    try:
        request.ParseFromString(data)
    except DecodeError as exc:
        raise RequestDecodeError(f"unable to parse protobuf: {exc}") from exc
    return GenerationRequest(
        proto_files=tuple(request.proto_file),
        files_to_generate=tuple(request.file_to_generate),
        parameter=request.parameter,
    )


def decode_descriptor_set(data: bytes, files_to_generate: Iterable[str] = ()) -> GenerationRequest:
    """Parse an encoded ``FileDescriptorSet`` as written by ``protoc --descriptor_set_out``.

    Without explicit targets every file of the set is targeted.
    """
    descriptor_set = FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(data)
    except DecodeError as exc:
        raise RequestDecodeError(f"unable to parse descriptor set: {exc}") from exc
    targets = tuple(files_to_generate) or tuple(file.name for file in descriptor_set.file)
    return GenerationRequest(proto_files=tuple(descriptor_set.file), files_to_generate=targets)


def encode_generation_response(files: Iterable[GeneratedFile]) -> bytes:
    """Serialize generated files into an encoded ``CodeGeneratorResponse``."""
    response = _new_response()
    for generated in files:
        response.file.add(name=generated.name, content=generated.content)
    return response.SerializeToString()


def encode_error_response(message: str) -> bytes:
    """Serialize a ``CodeGeneratorResponse`` reporting a generation failure."""
    response = _new_response()
    response.error = message
    return response.SerializeToString()


def _new_response() -> CodeGeneratorResponse:
    response = CodeGeneratorResponse()
    response.supported_features = CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    return response
