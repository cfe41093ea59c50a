"""Tests for schema loading and document checking."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from mutato.exceptions import InvalidSchemaError, SchemaLoadError
from mutato.models.json_schema_loader import load_schema
from mutato.schema import get_schema_path
from mutato.models.parsing.yaml_parser import YamlParser
from mutato.models.yaml_schema import SchemaGate


class TestSchemaLoading:
    """Tests for construction-time schema loading."""

    def test_bundled_schema_exists(self):
        assert get_schema_path().is_file()
        assert load_schema()["type"] == "object"

    def test_missing_schema(self, tmp_path):
        with pytest.raises(InvalidSchemaError, match="not found"):
            SchemaGate(tmp_path / "mutato.schema.json")

    def test_invalid_json(self, write_schema):
        with pytest.raises(InvalidSchemaError, match="Invalid JSON"):
            SchemaGate(write_schema("{ not json"))

    def test_invalid_json_schema(self, write_schema):
        with pytest.raises(InvalidSchemaError, match="Invalid JSON Schema"):
            SchemaGate(write_schema({"$schema": "http://json-schema.org/draft-07/schema#", "type": 12}))

    def test_non_object_schema(self, write_schema):
        with pytest.raises(InvalidSchemaError):
            SchemaGate(write_schema("[]"))

    def test_load_error_hierarchy(self, tmp_path):
        with pytest.raises(SchemaLoadError):
            SchemaGate(tmp_path / "absent.json")


class TestValidate:
    """Tests for SchemaGate.validate and SchemaGate.iter_issues."""

    def test_basic_document_is_valid(self, fixtures_dir):
        data = YamlParser().parse((fixtures_dir / "basic-yaml.yml").read_text(encoding="utf-8"))
        assert SchemaGate().validate(data) is True

    def test_construct_list_is_valid(self):
        data = {"version": "1.0.0", "mu": [{"network": None}, {"container": {"name": "web"}}]}
        assert SchemaGate().validate(data) is True

    def test_invalid_document_does_not_raise(self):
        assert SchemaGate().validate({"invalid": "yes"}) is False

    @pytest.mark.parametrize("value", [None, "string", 42, [], {}])
    def test_non_mapping_documents_are_invalid(self, value):
        assert SchemaGate().validate(value) is False

    def test_missing_required_keys(self):
        assert SchemaGate().validate({"version": "0.0.0"}) is False

    def test_container_only_document_is_valid(self):
        data = {"containers": [{"docker": {"name": "app", "file": "Dockerfile"}}]}
        assert SchemaGate().validate(data) is True

    def test_actions_only_document_is_valid(self):
        data = {"actions": [{"docker": {"name": "test", "container": "node:lts", "cmd": ["npm test"]}}]}
        assert SchemaGate().validate(data) is True

    def test_optional_keys_alone_are_invalid(self):
        assert SchemaGate().validate({"environments": [{"name": "dev"}]}) is False

    def test_issues_report_paths(self):
        issues = SchemaGate().iter_issues(
            {"version": "0.0.0", "mu": {"fargate": {"name": 5}}, "aliens": True}
        )
        paths = [i.yaml_path for i in issues]
        assert "" in paths
        assert any("aliens" in i.message for i in issues)

    def test_valid_document_has_no_issues(self):
        assert SchemaGate().iter_issues({"version": 1, "mu": {}}) == []

    def test_custom_schema(self, write_schema):
        gate = SchemaGate(write_schema({"type": "object", "required": ["name"]}))
        assert gate.validate({"name": "x"}) is True
        assert gate.validate({}) is False

    def test_concurrent_validation(self):
        gate = SchemaGate()
        docs = [{"version": "0.0.0", "mu": {"fargate": {"name": f"app-{i}"}}} for i in range(20)]
        docs += [{"bad": i} for i in range(20)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            verdicts = list(pool.map(gate.validate, docs))
        assert verdicts == [True] * 20 + [False] * 20
