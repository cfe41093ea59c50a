# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""JSON Schema loader for mutato document validation."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from ..exceptions import InvalidSchemaError

logger = logging.getLogger(__name__)

SCHEMA_FILE_NAME = "mutato.schema.json"


def get_schema_path() -> Path:
    """Get the path to the bundled mutato document schema."""
    # Get the directory containing this module
    schema_dir = Path(__file__).parent.parent / "schema"
    return schema_dir / SCHEMA_FILE_NAME


def load_schema(schema_path: Optional[Union[str, Path]] = None) -> dict:
    """Load and check a JSON Schema document.

    Args:
        schema_path: Schema file to load. Defaults to the bundled schema.

    Returns:
        Schema dictionary

    Raises:
        InvalidSchemaError: If the file is missing or unreadable, is not valid
            JSON, or is not itself a valid JSON Schema.
    """
    path = Path(schema_path) if schema_path is not None else get_schema_path()
    logger.debug("Loading schema: %s", path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except FileNotFoundError as e:
        raise InvalidSchemaError(f"Schema file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise InvalidSchemaError(
            f"Invalid JSON in schema file {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidSchemaError(f"Cannot read schema file {path}: {e}") from e

    if not isinstance(schema, dict):
        raise InvalidSchemaError(
            f"Schema root in {path} must be an object, got {type(schema).__name__}"
        )

    try:
        validator_for(schema).check_schema(schema)
    except SchemaError as e:
        raise InvalidSchemaError(f"Invalid JSON Schema in {path}: {e.message}") from e

    return schema
