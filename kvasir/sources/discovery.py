"""Glob expansion into a de-duplicated list of source files."""

from __future__ import annotations

import fnmatch
import glob
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from kvasir.diagnostics import DiagnosticSink
from kvasir.errors import GlobError

logger = logging.getLogger(__name__)

_GLOB_MAGIC = ("*", "?", "[")


def has_magic(part: str) -> bool:
    return any(ch in part for ch in _GLOB_MAGIC)


def static_prefix(pattern: str) -> Path:
    """Return the leading directory of a pattern that contains no glob magic.

    ``templates/**/*.j2`` -> ``templates``; ``docs/base.md`` -> ``docs``.
    """
    parts = Path(pattern).parts
    prefix: list[str] = []
    for part in parts[:-1]:
        if has_magic(part):
            break
        prefix.append(part)
    return Path(*prefix) if prefix else Path(".")


def _check_syntax(pattern: str) -> None:
    """Reject patterns glob would silently treat as literal text."""
    for segment in pattern.replace(os.sep, "/").split("/"):
        if "**" in segment and segment != "**":
            raise GlobError(pattern, "recursive wildcard '**' must be a whole path component")
        i = 0
        while (start := segment.find("[", i)) != -1:
            j = start + 1
            if j < len(segment) and segment[j] in "!^":
                j += 1
            # a ']' right after the opening bracket is a literal member
            if j < len(segment) and segment[j] == "]":
                j += 1
            close = segment.find("]", j)
            if close == -1:
                raise GlobError(pattern, f"unclosed character class at offset {start}")
            i = close + 1


def _walk_errors(pattern: str) -> list[GlobError]:
    """Directories under the pattern's static prefix that could not be listed.

    glob skips unreadable directories without telling anyone, so the part of
    the tree the pattern can reach is walked separately to surface them.
    """
    root = static_prefix(pattern)
    rest = Path(pattern).parts[len(root.parts) :]
    recursive = "**" in rest
    max_depth = len(rest) - 1
    errors: list[GlobError] = []

    def _onerror(e: OSError) -> None:
        if isinstance(e, (FileNotFoundError, NotADirectoryError)):
            return
        errors.append(GlobError(pattern, e.strerror or str(e), path=e.filename))

    base_depth = len(root.parts)
    for dirpath, dirnames, _files in os.walk(root, onerror=_onerror):
        if recursive:
            continue
        depth = len(Path(dirpath).parts) - base_depth
        if depth >= max_depth:
            dirnames.clear()
        else:
            dirnames[:] = [d for d in dirnames if fnmatch.fnmatchcase(d, rest[depth])]
    return errors


def _expand(pattern: str) -> tuple[list[Path], list[GlobError]]:
    if not pattern.strip():
        raise GlobError(pattern, "empty pattern")
    _check_syntax(pattern)
    try:
        matches = glob.glob(pattern, recursive=True, include_hidden=True)
    except (OSError, ValueError) as e:
        raise GlobError(pattern, str(e)) from e
    walk_errors = _walk_errors(pattern) if has_magic(pattern) else []
    # glob yields directory order; sort so runs are reproducible.
    return [Path(m) for m in sorted(matches)], walk_errors


def list_files(
    patterns: Iterable[str],
    sink: DiagnosticSink | None = None,
) -> tuple[list[Path], list[GlobError]]:
    """Return every unique file matched by one or more glob patterns.

    Paths which appear under more than one pattern are kept once, in the
    position of their first match. Directories are skipped. Listing problems
    are returned (and reported to ``sink``) instead of raised.
    """
    sink = sink or DiagnosticSink(logger)
    files: list[Path] = []
    errors: list[GlobError] = []
    seen: set[Path] = set()

    for pattern in patterns:
        try:
            matches, walk_errors = _expand(pattern)
        except GlobError as e:
            errors.append(e)
            sink.warn("discovery", str(e))
            continue

        for err in walk_errors:
            errors.append(err)
            sink.warn("discovery", str(err))

        if not matches:
            sink.debug("pattern %r matched no files", pattern)

        for path in matches:
            try:
                if not path.is_file():
                    continue
                key = path.resolve()
            except OSError as e:
                err = GlobError(pattern, str(e), path=path)
                errors.append(err)
                sink.warn("discovery", str(err))
                continue
            if key in seen:
                continue
            seen.add(key)
            files.append(path)

    sink.info("%d files to process.", len(files))
    return files, errors
