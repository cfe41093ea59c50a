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

"""Resolution pipeline: render -> parse -> validate.

``Parser.resolve`` turns a mutato document into plain Python data. Each stage
runs only if the previous one succeeded and every failure surfaces as a
``PipelineError`` whose ``stage`` names the step that failed.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .deployment.deployment_config import PipelineConfig
from .exceptions import (
    MalformedDocumentError,
    MalformedYamlError,
    RenderError,
    RenderFailedError,
    SchemaViolationError,
)
from .file_io.source_location import format_source, lookup_source
from .file_io.template_renderer import TemplateRenderer, read_source
from .models.parsing.yaml_parser import YamlParser
from .models.yaml_schema import SchemaGate
from .utils.duration import DEFAULT_TIMEOUT, Duration

logger = logging.getLogger(__name__)

Source = Union[str, Path]


def default_context() -> Dict[str, str]:
    """Context available to every document unless the caller overrides it."""
    return {
        "build_time": datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"),
    }


class Parser:
    """Resolves mutato documents into validated data.

    The pipeline keeps no per-call state: concurrent ``resolve`` calls on one
    instance are independent.
    """

    def __init__(
        self,
        schema_gate: Optional[SchemaGate] = None,
        renderer: Optional[TemplateRenderer] = None,
        context: Optional[Mapping[str, Any]] = None,
        timeout: Duration = DEFAULT_TIMEOUT,
    ):
        # SchemaGate() raises InvalidSchemaError here, before any document is read
        self.schema_gate = schema_gate if schema_gate is not None else SchemaGate()
        self.renderer = renderer if renderer is not None else TemplateRenderer(timeout)
        self.yaml_parser = YamlParser()

        merged = default_context()
        merged.update(context or {})
        self.context = MappingProxyType(merged)

    @classmethod
    def from_config(
        cls, config: PipelineConfig, context: Optional[Mapping[str, Any]] = None
    ) -> "Parser":
        return cls(
            schema_gate=SchemaGate(config.schema_path),
            renderer=TemplateRenderer(config.preprocessor_timeout),
            context=context,
        )

    def _merge_context(self, context: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        merged = dict(self.context)
        merged.update(context or {})
        return merged

    async def resolve(self, source: Source, context: Optional[Mapping[str, Any]] = None) -> Any:
        """Resolve a document.

        Args:
            source: A ``pathlib.Path`` is read from disk; a ``str`` is the
                document text itself. To read a file named by a string, pass
                ``Path(name)`` or call :meth:`parse_file`.
            context: Extra template variables, layered over the defaults.

        Returns:
            The parsed document, unchanged, once it passes the schema.

        Raises:
            SourceUnavailableError: The file cannot be read.
            RenderFailedError: Templating failed.
            MalformedDocumentError: The rendered text is not YAML.
            SchemaViolationError: The document does not match the schema.
        """
        if isinstance(source, Path):
            return await self.parse_file(source, context)
        return await self.parse_string(source, context)

    async def parse_file(self, path: Union[str, Path], context: Optional[Mapping[str, Any]] = None) -> Any:
        """Read the document at *path* and resolve it."""
        file_path = Path(path)
        text = await read_source(file_path)
        logger.debug("Resolving document from file: %s", file_path)
        return await self._resolve_text(text, context, file_path)

    async def parse_string(self, text: str, context: Optional[Mapping[str, Any]] = None) -> Any:
        """Resolve document *text*."""
        return await self._resolve_text(text, context, None)

    def resolve_sync(self, source: Source, context: Optional[Mapping[str, Any]] = None) -> Any:
        """Blocking variant of :meth:`resolve` for callers without an event loop."""
        return asyncio.run(self.resolve(source, context))

    async def _resolve_text(
        self,
        text: str,
        context: Optional[Mapping[str, Any]],
        file_path: Optional[Path],
    ) -> Any:
        label = str(file_path) if file_path is not None else "<string>"

        try:
            rendered = await self.renderer.render(text, self._merge_context(context))
        except RenderError as exc:
            raise RenderFailedError(f"Failed to render {label}: {exc}") from exc

        try:
            data, source_map = self.yaml_parser.parse_with_source(rendered)
        except MalformedYamlError as exc:
            raise MalformedDocumentError(
                f"Failed to parse {label}: {exc}", line=exc.line, column=exc.column
            ) from exc

        if not self.schema_gate.validate(data):
            issues = []
            lines = []
            for issue in self.schema_gate.iter_issues(data):
                loc = lookup_source(source_map, issue.yaml_path, file_path)
                issues.append(replace(issue, line=loc.line, column=loc.column))
                lines.append(f"  - {issue.message}{format_source(loc)}")
            details = "\n".join(lines)
            raise SchemaViolationError(f"Schema validation failed for {label}:\n{details}", issues)

        logger.debug("Resolved document %s", label)
        return data
