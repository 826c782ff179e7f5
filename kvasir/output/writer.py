"""Writes split entries to disk under an overwrite policy."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kvasir.diagnostics import DiagnosticSink
from kvasir.errors import FileWriteError, WriteConflictError
from kvasir.output.models import SplitEntry, WriteReport

logger = logging.getLogger(__name__)


class SplitFileWriter:
    """Persists SplitEntry values one by one.

    Existing files are left alone unless ``allow_overwrite`` is set; each
    such file is reported as a conflict and the rest of the batch continues.
    I/O failures are likewise reported per file. Entries are written in
    order, so if two entries share a destination and overwriting is allowed
    the later one wins; without overwrite the later one is a conflict.
    """

    def __init__(self, allow_overwrite: bool = False, sink: DiagnosticSink | None = None) -> None:
        self.allow_overwrite = allow_overwrite
        self._sink = sink or DiagnosticSink(logger)

    def write(self, entry: SplitEntry) -> None:
        """Write a single entry, raising WriteConflictError or FileWriteError."""
        dest = entry.path
        if dest.exists() and not self.allow_overwrite:
            raise WriteConflictError(dest)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(entry.body, encoding="utf-8")
        except OSError as e:
            raise FileWriteError(dest, str(e)) from e
        logger.info("wrote %s (%d bytes)", dest, len(entry.body))

    def write_batch(self, entries: Iterable[SplitEntry]) -> WriteReport:
        report = WriteReport()
        for entry in entries:
            try:
                self.write(entry)
            except WriteConflictError as e:
                report.conflicts.append(e)
                self._sink.warn("write", str(e), path=e.path)
            except FileWriteError as e:
                report.errors.append(e)
                self._sink.warn("write", str(e), path=e.path)
            else:
                report.written.append(entry.path)
        return report
