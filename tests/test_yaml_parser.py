"""Tests for YAML parsing."""

import pytest

from mutato.exceptions import MalformedYamlError, ParseError
from mutato.models.parsing.yaml_parser import YamlParser


class TestParse:
    """Tests for YamlParser.parse."""

    def test_basic_document(self, fixtures_dir):
        text = (fixtures_dir / "basic-yaml.yml").read_text(encoding="utf-8")
        assert YamlParser().parse(text) == {
            "version": 0.1,
            "mu": {"fargate": {"name": "app", "test": "foo"}},
        }

    def test_inline_document(self):
        result = YamlParser().parse("version: 0.1\nmu:\n  fargate:\n    name: app")
        assert result == {"version": 0.1, "mu": {"fargate": {"name": "app"}}}

    def test_flow_collections(self):
        assert YamlParser().parse("a: [1, 2, {b: c}]") == {"a": [1, 2, {"b": "c"}]}

    def test_plain_scalar_is_valid(self):
        assert YamlParser().parse("string") == "string"

    def test_empty_document(self):
        assert YamlParser().parse("") is None

    def test_malformed_mapping(self):
        with pytest.raises(MalformedYamlError) as exc_info:
            YamlParser().parse("not: valid: yaml: :")
        assert exc_info.value.line == 1
        assert exc_info.value.column is not None

    def test_malformed_is_parse_error(self, fixtures_dir):
        text = (fixtures_dir / "malformed.yml").read_text(encoding="utf-8")
        with pytest.raises(ParseError):
            YamlParser().parse(text)


class TestSourceMap:
    """Tests for line/column tracking."""

    def test_paths_and_locations(self):
        data, source_map = YamlParser().parse_with_source(
            "version: 0.0.0\nmu:\n  fargate:\n    name: app\n  list:\n    - x\n"
        )
        assert data["mu"]["list"] == ["x"]
        assert source_map["/version"] == {"line": 1, "column": 10}
        assert source_map["/mu/fargate/name"] == {"line": 4, "column": 11}
        assert source_map["/mu/list/0"] == {"line": 6, "column": 7}

    def test_keys_are_pointer_escaped(self):
        _, source_map = YamlParser().parse_with_source("a/b:\n  c~d: 1\n")
        assert "/a~1b/c~0d" in source_map

    def test_empty_document_has_empty_map(self):
        assert YamlParser().parse_with_source("") == (None, {})
