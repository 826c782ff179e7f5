"""Shared test fixtures for kvasir."""

import textwrap
from pathlib import Path

import pytest

from kvasir.config.models import KvasirConfig
from kvasir.diagnostics import DiagnosticSink


OPENAPI_YAML = textwrap.dedent(
    """\
    openapi: 3.0.3
    info:
      title: Widget API
      version: 1.0.0
    paths:
      /widgets:
        get:
          summary: List widgets
          responses:
            "200":
              description: OK
    """
)


@pytest.fixture
def openapi_yaml():
    return OPENAPI_YAML


@pytest.fixture
def source_tree(tmp_path):
    """A directory holding one file per supported format."""
    root = tmp_path / "sources"
    root.mkdir()
    (root / "a.json").write_text('{"x": 1}', encoding="utf-8")
    (root / "b.yaml").write_text("name: widget\ntags: [a, b]\n", encoding="utf-8")
    (root / "c.toml").write_text('[tool]\nname = "kvasir"\n', encoding="utf-8")
    (root / "d.ini").write_text("[server]\nPort = 8080\n", encoding="utf-8")
    (root / "e.xml").write_text('<root id="7"><child>text</child></root>', encoding="utf-8")
    (root / "f.conf").write_text("db { host = localhost }\n", encoding="utf-8")
    (root / "g.properties").write_text("app.name=widget\n", encoding="utf-8")
    (root / "api.yaml").write_text(OPENAPI_YAML, encoding="utf-8")
    (root / "schema.sql").write_text(
        "CREATE TABLE widget (id INT NOT NULL, name VARCHAR(20));\n", encoding="utf-8"
    )
    (root / "notes.txt").write_text("not a structured file", encoding="utf-8")
    return root


@pytest.fixture
def output_root(tmp_path):
    root = tmp_path / "out"
    root.mkdir()
    return root


class CountingReader:
    """Stand-in for the content cache reader that records every call."""

    def __init__(self, text: str = "{}", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> str:
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def counting_reader():
    return CountingReader


@pytest.fixture
def sink():
    return DiagnosticSink()


@pytest.fixture
def sample_config():
    return KvasirConfig()
