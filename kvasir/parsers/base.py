"""Decoder interface shared by every file format."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

Contents = Callable[[], str]


def has_extension(path: Path, extensions: tuple[str, ...]) -> bool:
    """Return whether ``path`` ends in one of ``extensions`` (without the dot)."""
    suffix = path.suffix.lower().lstrip(".")
    return bool(suffix) and suffix in extensions


@runtime_checkable
class FileParser(Protocol):
    """A named decoder turning one file into a JSON-shaped value.

    ``can_parse`` is meant to be cheap. Use the path alone wherever possible;
    calling ``contents()`` is allowed for ambiguous formats and costs one read
    per file for the whole run, since the accessor is backed by the content
    cache.
    """

    name: str

    def can_parse(self, path: Path, contents: Contents) -> bool: ...

    def parse(self, path: Path, contents: Contents) -> Any: ...
