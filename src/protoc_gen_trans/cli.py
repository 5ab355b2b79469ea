"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

import click
import yaml

from protoc_gen_trans.code_generation import GeneratedFile
from protoc_gen_trans.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_settings,
    write_placeholder_configuration,
)
from protoc_gen_trans.plugin_boundary import (
    GenerationError,
    RequestDecodeError,
    analyse_schema_files,
    decode_descriptor_set,
    decode_generation_request,
    encode_error_response,
    encode_generation_response,
    generate_translation_modules,
)
from protoc_gen_trans.schema_analysis import (
    DescriptorMappingError,
    TranslationAnnotationReader,
    map_schema_files,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="protoc-gen-trans")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug details to stderr.")
def cli(verbose: bool) -> None:
    """Translation helper generator for annotated protobuf messages."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format=_LOG_FORMAT)


@cli.command(name="plugin")
def plugin() -> None:
    """Run as a protoc plugin: read the request on stdin, write the response to stdout."""
    stdin = click.get_binary_stream("stdin")
    stdout = click.get_binary_stream("stdout")
    try:
        request = decode_generation_request(stdin.read())
        settings = load_settings(request.parameter)
        outcome = generate_translation_modules(request, settings)
    except (RequestDecodeError, ConfigurationError, GenerationError) as exc:
        # protoc reads the response only when the plugin exits zero.
        stdout.write(encode_error_response(str(exc)))
        stdout.flush()
        return
    stdout.write(encode_generation_response(outcome.files))
    stdout.flush()


@cli.command(name="plan")
@click.option(
    "--descriptor-set",
    "descriptor_set_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a FileDescriptorSet written by protoc --include_imports --descriptor_set_out",
)
@click.option(
    "--file",
    "files",
    multiple=True,
    help="Schema file to plan (repeatable); defaults to every file in the set",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a YAML generator settings file",
)
def plan(descriptor_set_path: str, files: tuple[str, ...], config_path: str | None) -> None:
    """Print the translation plan of every message type as YAML."""
    try:
        settings = load_settings(config_path=config_path)
        request = decode_descriptor_set(Path(descriptor_set_path).read_bytes(), files)
        reader = TranslationAnnotationReader.from_file_descriptors(
            request.proto_files, settings.annotation_extension
        )
        planned = analyse_schema_files(
            map_schema_files(request.proto_files, reader), request.files_to_generate, settings
        )
    except (
        ConfigurationError,
        RequestDecodeError,
        DescriptorMappingError,
        GenerationError,
        OSError,
    ) as exc:
        raise CliError(str(exc)) from exc

    document = {
        "files": [
            {
                "name": schema_file.name,
                "messages": {
                    type_name: [
                        {
                            "name": field.name,
                            "classification": field.classification.value,
                            "repeated": field.repeated,
                        }
                        for field in message_plan.fields
                    ]
                    for type_name, message_plan in plans.items()
                },
            }
            for schema_file, plans in planned
        ]
    }
    click.echo(yaml.safe_dump(document, sort_keys=False, allow_unicode=True), nl=False)


@cli.command(name="generate")
@click.option(
    "--descriptor-set",
    "descriptor_set_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a FileDescriptorSet written by protoc --include_imports --descriptor_set_out",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=True,
    type=click.Path(path_type=str),
    help="Directory receiving the generated translation modules",
)
@click.option(
    "--file",
    "files",
    multiple=True,
    help="Schema file to generate for (repeatable); defaults to every file in the set",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a YAML generator settings file",
)
def generate(
    descriptor_set_path: str,
    output_dir: str,
    files: tuple[str, ...],
    config_path: str | None,
) -> None:
    """Generate translation modules from a descriptor set without protoc."""
    try:
        settings = load_settings(config_path=config_path)
        request = decode_descriptor_set(Path(descriptor_set_path).read_bytes(), files)
        outcome = generate_translation_modules(request, settings)
        written = _write_generated_files(outcome.files, Path(output_dir))
    except (ConfigurationError, RequestDecodeError, GenerationError, OSError) as exc:
        raise CliError(str(exc)) from exc
    for path in written:
        click.echo(str(path))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML generator settings template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML generator settings file listing every key with its default."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _write_generated_files(files: Iterable[GeneratedFile], output_dir: Path) -> list[Path]:
    written: list[Path] = []
    for generated in files:
        destination = output_dir / generated.name
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(generated.content, encoding="utf-8")
        written.append(destination.resolve())
    return written


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), prog_name="trans-gen", standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


def plugin_main() -> int:
    """Entry point for the protoc-gen-trans executable invoked by protoc."""
    return main(["plugin"])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
