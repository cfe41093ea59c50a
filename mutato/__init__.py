"""mutato: resolve templated mutato.yml documents into validated data."""

__version__ = "0.1.0"

from .exceptions import (
    BadBuiltinArgumentError,
    BuiltinExecutionError,
    InvalidSchemaError,
    MalformedDocumentError,
    MalformedExpressionError,
    MalformedYamlError,
    MutatoError,
    ParseError,
    PipelineError,
    RenderError,
    RenderFailedError,
    SchemaLoadError,
    SchemaViolationError,
    SourceUnavailableError,
    UndefinedReferenceError,
)
from .file_io.template_renderer import TemplateRenderer
from .models.parsing.yaml_parser import YamlParser
from .models.yaml_schema import SchemaGate, SchemaIssue
from .parser import Parser, default_context
from .utils.flatten import to_environment_map
