"""Code generation exports."""

from .module_renderer import (
    TEMPLATE_NAME,
    GeneratedFile,
    output_file_name,
    output_module_name,
    render_translations_module,
)

__all__ = [
    "TEMPLATE_NAME",
    "GeneratedFile",
    "output_file_name",
    "output_module_name",
    "render_translations_module",
]
