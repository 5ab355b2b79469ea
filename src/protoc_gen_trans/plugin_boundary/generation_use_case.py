"""Generation run use-case service."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from protoc_gen_trans.code_generation.module_renderer import (
    GeneratedFile,
    render_translations_module,
)
from protoc_gen_trans.configuration.runtime_settings import GeneratorSettings
from protoc_gen_trans.schema_analysis import (
    DescriptorMappingError,
    MessagePlan,
    SchemaFile,
    SchemaValidationError,
    TranslationAnnotationReader,
    build_file_plans,
    build_type_index,
    map_schema_files,
)

from .generation_contracts import GenerationOutcome, GenerationRequest

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when a generation run cannot be completed."""


def generate_translation_modules(
    request: GenerationRequest,
    settings: GeneratorSettings | None = None,
) -> GenerationOutcome:
    """Analyse every targeted schema file, then render one module per file.

    Rendering starts only after every targeted file was analysed, so a schema
    error anywhere yields no output at all.
    """
    resolved_settings = settings or GeneratorSettings()
    schema_files = _load_schema_files(request, resolved_settings)
    planned = analyse_schema_files(schema_files, request.files_to_generate, resolved_settings)

    generated: list[GeneratedFile] = []
    for schema_file, plans in planned:
        output = render_translations_module(schema_file, plans, resolved_settings)
        logger.info("Generated %s (%d message plans).", output.name, len(plans))
        generated.append(output)
    return GenerationOutcome(files=tuple(generated))


def analyse_schema_files(
    schema_files: Sequence[SchemaFile],
    files_to_generate: Sequence[str],
    settings: GeneratorSettings,
) -> list[tuple[SchemaFile, dict[str, MessagePlan]]]:
    """Build message plans for the targeted files against one shared type index."""
    index = build_type_index(schema_files)
    targets = set(files_to_generate)
    planned: list[tuple[SchemaFile, dict[str, MessagePlan]]] = []
    for schema_file in schema_files:
        if schema_file.name not in targets:
            continue
        if settings.is_excluded(schema_file.name):
            logger.debug("Skipping excluded schema file %s.", schema_file.name)
            continue
        try:
            plans = build_file_plans(
                schema_file, index, well_known_prefix=settings.well_known_prefix
            )
        except SchemaValidationError as exc:
            raise GenerationError(f"error: {exc}") from exc
        planned.append((schema_file, plans))
    return planned


def _load_schema_files(
    request: GenerationRequest, settings: GeneratorSettings
) -> tuple[SchemaFile, ...]:
    try:
        reader = TranslationAnnotationReader.from_file_descriptors(
            request.proto_files, settings.annotation_extension
        )
        return map_schema_files(request.proto_files, reader)
    except DescriptorMappingError as exc:
        raise GenerationError(str(exc)) from exc
