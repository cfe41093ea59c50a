"""Document models: YAML parsing and schema checking."""

from .parsing.yaml_parser import YamlParser
from .yaml_schema import SchemaGate, SchemaIssue

__all__ = ["YamlParser", "SchemaGate", "SchemaIssue"]
