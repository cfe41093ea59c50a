"""Tests for duration parsing and environment flattening."""

import pytest

from mutato.utils.duration import parse_duration
from mutato.utils.flatten import to_environment_map


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (10, 10.0),
            (2.5, 2.5),
            ("10s", 10.0),
            ("10", 10.0),
            ("500ms", 0.5),
            ("1.5m", 90.0),
            ("2h", 7200.0),
            (" 3 S ", 3.0),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_duration(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "soon", "10d", "-1s", 0, -5, True, None, [1]])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_duration(raw)


class TestToEnvironmentMap:
    """Tests for to_environment_map."""

    def test_nested_document(self):
        doc = {
            "opts": {
                "git": {"branch": "main", "secret": ""},
                "preprocessor": {"timeout": "10s"},
            },
            "enabled": True,
            "count": 3,
            "nothing": None,
        }
        assert to_environment_map(doc) == {
            "mutato_opts__git__branch": "main",
            "mutato_opts__git__secret": "",
            "mutato_opts__preprocessor__timeout": "10s",
            "mutato_enabled": "true",
            "mutato_count": "3",
            "mutato_nothing": "",
        }

    def test_sequences_use_indexes(self):
        doc = {"actions": [{"name": "test"}, {"name": "deploy", "cmd": ["a", "b"]}]}
        assert to_environment_map(doc, prefix="mu") == {
            "mu_actions__0__name": "test",
            "mu_actions__1__name": "deploy",
            "mu_actions__1__cmd__0": "a",
            "mu_actions__1__cmd__1": "b",
        }

    def test_empty_containers_produce_nothing(self):
        assert to_environment_map({"a": {}, "b": []}) == {}

    def test_scalar_root(self):
        assert to_environment_map(False) == {"mutato": "false"}

    def test_unsupported_leaf(self):
        with pytest.raises(TypeError, match="a__b"):
            to_environment_map({"a": {"b": object()}})


class TestSplitStreamLogging:
    """Tests for configure_split_stream_logging."""

    def test_levels_are_split(self, capsys):
        import logging

        from mutato.utils.logging_utils import configure_split_stream_logging

        logger = configure_split_stream_logging(level=logging.INFO, stderr_level=logging.WARNING)
        logging.getLogger("mutato.test").info("to stdout")
        logging.getLogger("mutato.test").warning("to stderr")
        logging.getLogger("mutato.test").debug("dropped")

        captured = capsys.readouterr()
        assert logger.name == "mutato"
        assert "to stdout" in captured.out
        assert "to stderr" not in captured.out
        assert "to stderr" in captured.err
        assert "dropped" not in captured.out + captured.err
