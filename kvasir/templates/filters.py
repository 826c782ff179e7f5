"""Custom Jinja2 filters and globals available to kvasir templates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePath
from typing import Any

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_json_path

from kvasir.sources import list_files


def filename(path: str) -> str:
    """``a/b/c.yaml`` -> ``c.yaml``"""
    return PurePath(str(path)).name


def extension(path: str) -> str:
    """``a/b/c.yaml`` -> ``yaml``; empty when there is no extension."""
    return PurePath(str(path)).suffix.lstrip(".")


def parent(path: str) -> str:
    """``a/b/c.yaml`` -> ``a/b``"""
    return PurePath(str(path)).parent.as_posix()


def json_path(value: Any, path: str) -> list[Any]:
    """Project ``value`` through a JSONPath expression and return every match."""
    if not path:
        raise ValueError("json_path requires a non-empty path expression")
    try:
        expr = parse_json_path(path)
    except JSONPathError as e:
        raise ValueError(f"Invalid JSONPath {path!r}: {e}") from e
    return [match.value for match in expr.find(value)]


def with_parser(files: Iterable[Mapping[str, Any]], name: str) -> list[Mapping[str, Any]]:
    """Keep parse results produced by the parser called ``name``."""
    return [f for f in files if f.get("parser") == name]


def with_path(files: Iterable[Mapping[str, Any]], path: str) -> list[Mapping[str, Any]]:
    """Keep parse results for exactly ``path``."""
    return [f for f in files if f.get("path") == str(path)]


def glob_paths(pattern: str) -> list[str]:
    """Expand a glob from inside a template; returns path strings."""
    files, _errors = list_files([pattern])
    return [str(f) for f in files]


FILTERS = {
    "filename": filename,
    "extension": extension,
    "parent": parent,
    "json_path": json_path,
    "jsonPath": json_path,
    "with_parser": with_parser,
    "with_path": with_path,
}

GLOBALS = {
    "glob": glob_paths,
}
