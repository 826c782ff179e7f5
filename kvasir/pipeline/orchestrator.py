"""Runs every capable decoder against every discovered file."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic_core import to_jsonable_python

from kvasir.diagnostics import DiagnosticSink
from kvasir.errors import DecodeError, KvasirError
from kvasir.parsers import FileParser, ParseFailure, ParseOutcome, ParseSuccess
from kvasir.parsers import parsers as default_parsers
from kvasir.sources import ContentCache, list_files

logger = logging.getLogger(__name__)


def _attempt(
    parser: FileParser, path: Path, cache: ContentCache, sink: DiagnosticSink
) -> ParseSuccess | ParseFailure | None:
    """Try one decoder on one file. Returns None when the decoder declines."""
    contents = cache.contents(path)
    try:
        if not parser.can_parse(path, contents):
            return None
        value = parser.parse(path, contents)
        success = ParseSuccess(
            path=str(path),
            parser=parser.name,
            contents=to_jsonable_python(value),
        )
    except KvasirError as e:
        error: KvasirError = e
    except Exception as e:
        logger.debug("%s raised unexpectedly on %s", parser.name, path, exc_info=True)
        error = DecodeError(parser.name, path, f"{type(e).__name__}: {e}")
        error.__cause__ = e
    else:
        sink.debug("  succeeded parsing %s with %s.", path, parser.name)
        return success

    sink.warn("parse", f"failed parsing with {parser.name} ({error})", path=path)
    return ParseFailure(path=path, parser=parser.name, error=error)


def parse_file(
    path: Path,
    parsers: Sequence[FileParser],
    cache: ContentCache | None = None,
    sink: DiagnosticSink | None = None,
) -> ParseOutcome:
    """Parse one file with every parser that claims it.

    Each parser's capability check runs first; only parsers answering True
    get ``parse`` called. The file contents are shared through ``cache`` so
    the file is read at most once however many parsers look at it. A failure
    in one parser never hides another parser's success.
    """
    cache = cache or ContentCache()
    sink = sink or DiagnosticSink(logger)
    sink.debug("%s:", path)

    outcome = ParseOutcome()
    for parser in parsers:
        result = _attempt(parser, path, cache, sink)
        if isinstance(result, ParseSuccess):
            outcome.successes.append(result)
        elif isinstance(result, ParseFailure):
            outcome.failures.append(result)
    return outcome


def parse_paths(
    paths: Sequence[Path],
    parsers: Sequence[FileParser] | None = None,
    *,
    jobs: int = 1,
    cache: ContentCache | None = None,
    sink: DiagnosticSink | None = None,
) -> ParseOutcome:
    """Parse already-discovered files and merge the per-file outcomes.

    Output order is file order, then parser registration order within a
    file, for any value of ``jobs``.
    """
    parsers = list(parsers) if parsers is not None else default_parsers()
    cache = cache or ContentCache()
    sink = sink or DiagnosticSink(logger)

    def _one(path: Path) -> ParseOutcome:
        return parse_file(path, parsers, cache, sink)

    if jobs > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            per_file: Iterable[ParseOutcome] = list(pool.map(_one, paths))
    else:
        per_file = [_one(p) for p in paths]

    total = ParseOutcome()
    for outcome in per_file:
        total.extend(outcome)

    sink.info("%d parsers succeeded.", len(total.successes))
    sink.info("%d parsers failed.", len(total.failures))
    return total


def parse_files(
    patterns: Sequence[str],
    parsers: Sequence[FileParser] | None = None,
    *,
    jobs: int = 1,
    sink: DiagnosticSink | None = None,
) -> ParseOutcome:
    """Discover files from glob patterns and parse them all.

    Listing errors are reported to ``sink`` and do not stop the run.
    """
    sink = sink or DiagnosticSink(logger)
    files, _errors = list_files(patterns, sink)
    return parse_paths(files, parsers, jobs=jobs, sink=sink)
