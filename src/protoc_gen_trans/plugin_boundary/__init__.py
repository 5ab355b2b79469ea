"""Generation request/response boundary exports."""

from .generation_contracts import GenerationOutcome, GenerationRequest
from .generation_use_case import (
    GenerationError,
    analyse_schema_files,
    generate_translation_modules,
)
from .request_codec import (
    RequestDecodeError,
    decode_descriptor_set,
    decode_generation_request,
    encode_error_response,
    encode_generation_response,
)

__all__ = [
    "GenerationRequest",
    "GenerationOutcome",
    "GenerationError",
    "RequestDecodeError",
    "analyse_schema_files",
    "decode_descriptor_set",
    "decode_generation_request",
    "encode_error_response",
    "encode_generation_response",
    "generate_translation_modules",
]
