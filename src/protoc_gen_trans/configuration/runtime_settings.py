"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass

from protoc_gen_trans.schema_analysis import DEFAULT_ANNOTATION_EXTENSION, DEFAULT_WELL_KNOWN_PREFIX

DEFAULT_OUTPUT_SUFFIX = "_trans.py"
DEFAULT_EXCLUDED_FILE_FRAGMENTS: tuple[str, ...] = ("google/protobuf", "extensions.proto")
DEFAULT_RUNTIME_MODULE = "protoc_gen_trans.reconciliation"


@dataclass(frozen=True)
class GeneratorSettings:
    """Settings for one generation run."""

    annotation_extension: str = DEFAULT_ANNOTATION_EXTENSION
    well_known_prefix: str = DEFAULT_WELL_KNOWN_PREFIX
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    excluded_file_fragments: tuple[str, ...] = DEFAULT_EXCLUDED_FILE_FRAGMENTS
    runtime_module: str = DEFAULT_RUNTIME_MODULE

    def is_excluded(self, file_name: str) -> bool:
        """Return True for schema files that never get generated output."""
        return any(fragment in file_name for fragment in self.excluded_file_fragments)
