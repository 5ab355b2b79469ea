"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "trans-gen.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Generator settings for protoc-gen-trans.
# Every key is optional; remove a key to keep its default.
# Pass this file to protoc with --trans_opt=config=<path>,
# or to trans-gen with --config <path>.

# Fully-qualified name of the bool FieldOptions extension marking translatable fields.
annotation_extension: "trans.translated"

# Message types under this prefix never carry annotations and are not traversed.
well_known_prefix: ".google.protobuf"

# Replaces the ".proto" extension of each schema file to name its generated module.
output_suffix: "_trans.py"

# Schema files whose names contain any of these fragments get no generated module.
excluded_file_fragments:
  - "google/protobuf"
  - "extensions.proto"

# Module imported by generated code for the reconciliation runtime.
runtime_module: "protoc_gen_trans.reconciliation"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML settings template listing every key with its default."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the settings template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
