import json
import logging
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def user(monkeypatch) -> str:
    """Pin $USER so tests do not depend on the login environment."""
    monkeypatch.setenv("USER", "mutato-tester")
    return "mutato-tester"


@pytest.fixture
def write_schema(tmp_path):
    """Write a schema document to a temporary file and return its path."""

    def _write(content) -> Path:
        path = tmp_path / "schema.json"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_mutato_logger():
    """Drop handlers the CLI installs so they do not outlive captured streams."""
    yield
    logger = logging.getLogger("mutato")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
