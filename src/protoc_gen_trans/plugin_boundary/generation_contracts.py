"""Generation run entities."""

from __future__ import annotations

from dataclasses import dataclass

from google.protobuf.descriptor_pb2 import FileDescriptorProto

from protoc_gen_trans.code_generation.module_renderer import GeneratedFile


@dataclass(frozen=True)
class GenerationRequest:
    """Input contract for one generation run.

    ``proto_files`` holds every file of the request, dependencies before the
    files that import them.
    """

    proto_files: tuple[FileDescriptorProto, ...]
    files_to_generate: tuple[str, ...]
    parameter: str = ""


@dataclass(frozen=True)
class GenerationOutcome:
    """Output contract for one completed generation run."""

    files: tuple[GeneratedFile, ...]
