"""Read-once text cache for source files."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

from kvasir.errors import FileReadError

Reader = Callable[[Path], str]


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class _Cell:
    """Single-assignment slot holding either the text or the read error."""

    __slots__ = ("_lock", "_filled", "_value", "_error")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._filled = False
        self._value: str | None = None
        self._error: FileReadError | None = None

    def get_or_fill(self, path: Path, reader: Reader) -> str:
        if not self._filled:
            with self._lock:
                if not self._filled:
                    try:
                        self._value = reader(path)
                    except (OSError, UnicodeDecodeError) as e:
                        self._error = FileReadError(path, str(e))
                        self._error.__cause__ = e
                    self._filled = True
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]


class ContentCache:
    """Per-run cache mapping each source file to its UTF-8 contents.

    The first request for a path performs the read; later requests for the
    same path (from any decoder, on any thread) get the stored text or the
    stored FileReadError without touching the filesystem again.
    """

    def __init__(self, reader: Reader = read_text) -> None:
        self._reader = reader
        self._cells: dict[Path, _Cell] = {}
        self._lock = threading.Lock()

    def _cell(self, path: Path) -> _Cell:
        key = Path(path).absolute()
        with self._lock:
            cell = self._cells.get(key)
            if cell is None:
                cell = self._cells[key] = _Cell()
            return cell

    def get(self, path: Path) -> str:
        """Return the text of ``path``, raising FileReadError if it can't be read."""
        return self._cell(path).get_or_fill(Path(path), self._reader)

    def contents(self, path: Path) -> LazyContents:
        return LazyContents(self, Path(path))


class LazyContents:
    """Zero-argument accessor handed to decoders; nothing is read until called."""

    __slots__ = ("_cache", "path")

    def __init__(self, cache: ContentCache, path: Path) -> None:
        self._cache = cache
        self.path = path

    def __call__(self) -> str:
        return self._cache.get(self.path)
