"""Schema definitions and validation.

This package holds the bundled ``mutato.schema.json`` document and re-exports
the gate that checks documents against it.
"""

from ..models.json_schema_loader import get_schema_path, load_schema
from ..models.yaml_schema import SchemaGate, SchemaIssue
