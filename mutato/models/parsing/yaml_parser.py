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

"""YAML document parser."""

import logging
from typing import Any, Dict, Tuple

import yaml

from ...exceptions import MalformedYamlError

logger = logging.getLogger(__name__)

SourceMap = Dict[str, Dict[str, int]]


class YamlParser:
    """Parses rendered text into plain Python data (dict/list/scalars).

    The parser holds no state, so one instance can be shared freely.
    """

    @staticmethod
    def _json_pointer_escape(token: str) -> str:
        # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
        return token.replace("~", "~0").replace("/", "~1")

    @staticmethod
    def _malformed(exc: yaml.YAMLError) -> MalformedYamlError:
        mark = getattr(exc, "problem_mark", None)
        if mark is None:
            return MalformedYamlError(f"Failed to parse YAML content: {exc}")
        # PyYAML uses 0-based line/column
        return MalformedYamlError(
            f"Failed to parse YAML content: {exc}",
            line=int(mark.line) + 1,
            column=int(mark.column) + 1,
        )

    @classmethod
    def _build_source_map_from_yaml(cls, content: str) -> SourceMap:
        """Build a mapping from YAML JSON-pointer-like paths to 1-based line/column.

        This uses PyYAML's node tree (yaml.compose) so we can track locations without
        changing the parsed data shapes returned by safe_load.
        """
        source_map: SourceMap = {}

        try:
            root = yaml.compose(content, Loader=yaml.SafeLoader)
        except yaml.YAMLError:
            # Parsing errors are reported by parse().
            return source_map

        if root is None:
            return source_map

        def _record(path: str, node) -> None:
            mark = getattr(node, "start_mark", None)
            if mark is None:
                return
            source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

        def _walk(node, path: str) -> None:
            _record(path, node)

            if isinstance(node, yaml.nodes.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    _walk(value_node, f"{path}/{cls._json_pointer_escape(str(key))}")
            elif isinstance(node, yaml.nodes.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, f"{path}/{idx}")

        _walk(root, "")
        return source_map

    def parse(self, content: str) -> Any:
        """Parse YAML text.

        Plain scalars are valid YAML and come back as scalars; an empty
        document comes back as ``None``.

        Raises:
            MalformedYamlError: If the text is not syntactically valid YAML.
        """
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            logger.debug("YAML parse failure: %s", exc)
            raise self._malformed(exc) from exc

    def parse_with_source(self, content: str) -> Tuple[Any, SourceMap]:
        """Parse YAML text and return ``(data, source_map)``.

        source_map keys are JSON-pointer-like YAML paths (e.g. "/mu/fargate/name").
        Values contain 1-based line/column.
        """
        data = self.parse(content)
        return data, self._build_source_map_from_yaml(content)
