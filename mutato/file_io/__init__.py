"""File I/O related utilities.

This package groups small modules that deal with reading and rendering
documents and formatting file-backed diagnostics.
"""

from .source_location import SourceLocation, lookup_source, format_source
from .template_renderer import TemplateRenderer, read_source, run_shell_command

__all__ = [
    "SourceLocation",
    "lookup_source",
    "format_source",
    "TemplateRenderer",
    "read_source",
    "run_shell_command",
]
