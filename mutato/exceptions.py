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

"""Custom exceptions for the mutato configuration pipeline."""

from typing import List, Optional


class MutatoError(Exception):
    """Base exception for mutato related errors."""
    pass


# ---- render stage -----------------------------------------------------------


class RenderError(MutatoError):
    """Exception raised when a template cannot be rendered."""
    pass


class UndefinedReferenceError(RenderError):
    """A template referenced a variable absent from the context."""

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name


class BadBuiltinArgumentError(RenderError):
    """A built-in (``env``/``cmd``) was called with the wrong arity or type."""

    def __init__(self, message: str, builtin: str):
        super().__init__(message)
        self.builtin = builtin


class BuiltinExecutionError(RenderError):
    """A ``cmd()`` subprocess exited non-zero or exceeded its timeout."""

    def __init__(
        self,
        message: str,
        command: str,
        returncode: Optional[int] = None,
        stderr: str = "",
        timed_out: bool = False,
    ):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out


class MalformedExpressionError(RenderError):
    """The body of a ``{{ }}`` expression is not valid template syntax."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


# ---- parse stage ------------------------------------------------------------


class ParseError(MutatoError):
    """Exception raised when rendered text cannot be parsed."""
    pass


class MalformedYamlError(ParseError):
    """The text is not syntactically valid YAML."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


# ---- schema -----------------------------------------------------------------


class SchemaLoadError(MutatoError):
    """Exception raised when the schema document itself cannot be loaded."""
    pass


class InvalidSchemaError(SchemaLoadError):
    """The schema resource is missing, is not JSON or is not a valid JSON-Schema."""
    pass


# ---- pipeline ---------------------------------------------------------------


class PipelineError(MutatoError):
    """Exception raised by the resolution pipeline.

    ``stage`` names the step that failed: ``source``, ``render``, ``parse`` or
    ``validate``.
    """

    stage: str = ""


class SourceUnavailableError(PipelineError):
    """The source file is missing or unreadable."""

    stage = "source"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class RenderFailedError(PipelineError):
    """The render stage failed; the ``RenderError`` is chained as ``__cause__``."""

    stage = "render"


class MalformedDocumentError(PipelineError):
    """The rendered document is not valid YAML."""

    stage = "parse"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class SchemaViolationError(PipelineError):
    """The document does not conform to the schema."""

    stage = "validate"

    def __init__(self, message: str, issues: Optional[List] = None):
        super().__init__(message)
        self.issues = list(issues or [])
