# Copyright 2025 TIER IV, inc.
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

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from jsonschema.validators import validator_for

from .json_schema_loader import load_schema

logger = logging.getLogger(__name__)

JsonPointer = str


@dataclass(frozen=True)
class SchemaIssue:
    message: str
    yaml_path: Optional[JsonPointer] = None
    line: Optional[int] = None
    column: Optional[int] = None


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _pointer(parts) -> JsonPointer:
    return "".join(f"/{_jp_escape(str(p))}" for p in parts)


class SchemaGate:
    """Checks parsed documents against the mutato JSON Schema.

    The schema is loaded eagerly; a missing or broken schema raises
    ``InvalidSchemaError`` from the constructor. After that, checking a
    document never raises for content problems: :meth:`validate` answers
    ``True``/``False`` and :meth:`iter_issues` lists what is wrong.

    The compiled validator is never mutated, so a gate can be shared across
    threads and tasks.
    """

    def __init__(self, schema_path: Optional[Union[str, Path]] = None):
        self.schema = load_schema(schema_path)
        self._validator = validator_for(self.schema)(self.schema)

    def validate(self, value: Any) -> bool:
        """Return whether *value* conforms to the schema."""
        valid = self._validator.is_valid(value)
        if not valid:
            logger.debug("Document failed schema validation")
        return valid

    def iter_issues(self, value: Any) -> List[SchemaIssue]:
        """Return every schema violation in *value*, ordered by document path."""
        errors = sorted(
            self._validator.iter_errors(value),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        return [
            SchemaIssue(message=e.message, yaml_path=_pointer(e.absolute_path))
            for e in errors
        ]
