"""Models for split output files and write results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from kvasir.errors import FileWriteError, WriteConflictError


@dataclass(frozen=True)
class SplitEntry:
    """One destination file carved out of a rendered document.

    ``path`` is already joined onto the output root, normalised and checked
    to lie inside it.
    """

    path: Path
    body: str


@dataclass
class WriteReport:
    written: list[Path] = field(default_factory=list)
    conflicts: list[WriteConflictError] = field(default_factory=list)
    errors: list[FileWriteError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts and not self.errors
