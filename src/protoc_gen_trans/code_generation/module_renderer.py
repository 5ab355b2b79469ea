"""Python translation module rendering service."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined

from protoc_gen_trans.configuration.runtime_settings import GeneratorSettings
from protoc_gen_trans.schema_analysis.plan_models import MessagePlan
from protoc_gen_trans.schema_analysis.schema_models import SchemaFile

TEMPLATE_NAME = "translations_module.py.j2"

_PROTO_EXTENSION = ".proto"


@dataclass(frozen=True)
class GeneratedFile:
    """Named textual output for one schema file."""

    name: str
    content: str


@dataclass(frozen=True)
class _DependencyImport:
    module: str
    alias: str


def output_file_name(schema_name: str, output_suffix: str) -> str:
    """Derive the generated file name from a schema file name."""
    return schema_name.removesuffix(_PROTO_EXTENSION) + output_suffix


def output_module_name(schema_name: str, output_suffix: str) -> str:
    """Return the dotted import path of a schema file's generated module."""
    file_name = output_file_name(schema_name, output_suffix)
    return file_name.removesuffix(".py").replace("/", ".")


def render_translations_module(
    schema_file: SchemaFile,
    plans: Mapping[str, MessagePlan],
    settings: GeneratorSettings,
) -> GeneratedFile:
    """Render the translation module for one schema file.

    Args:
      schema_file: File the module is generated for.
      plans: Plans of the file's message types, in declaration order.
      settings: Generator settings controlling naming and imports.

    Returns:
      The generated file name and its Python source.
    """
    template = _environment().get_template(TEMPLATE_NAME)
    content = template.render(
        source_name=schema_file.name,
        runtime_module=settings.runtime_module,
        dependencies=_dependency_imports(schema_file.dependencies, settings),
        plans=list(plans.values()),
    )
    return GeneratedFile(
        name=output_file_name(schema_file.name, settings.output_suffix),
        content=content,
    )


def _dependency_imports(
    dependencies: Iterable[str], settings: GeneratorSettings
) -> list[_DependencyImport]:
    included = [name for name in dependencies if not settings.is_excluded(name)]
    return [
        _DependencyImport(
            module=output_module_name(name, settings.output_suffix),
            alias=f"_dependency_{position}",
        )
        for position, name in enumerate(included)
    ]


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("protoc_gen_trans.code_generation", "templates"),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
