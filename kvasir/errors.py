"""Exception hierarchy for kvasir."""

from __future__ import annotations

from pathlib import Path


class KvasirError(Exception):
    """Base class for every error raised by kvasir."""


class FileReadError(KvasirError):
    """Raised when a source file cannot be read as UTF-8 text."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not read {self.path}: {reason}")


class FileWriteError(KvasirError):
    """Raised when a destination file or its parent directories cannot be written."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not write {self.path}: {reason}")


class DecodeError(KvasirError):
    """A decoder rejected a file."""

    def __init__(self, parser: str, path: Path | str, reason: str):
        self.parser = parser
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{parser} could not decode {self.path}: {reason}")


class GlobError(KvasirError):
    """A glob pattern was malformed or its expansion hit a filesystem error."""

    def __init__(self, pattern: str, reason: str, path: Path | str | None = None):
        self.pattern = pattern
        self.reason = reason
        self.path = Path(path) if path is not None else None
        msg = f"Error listing '{pattern}'"
        if self.path is not None:
            msg += f" at {self.path}"
        super().__init__(f"{msg}: {reason}")


class TemplateError(KvasirError):
    """Template lookup or rendering failed."""


class PathContainmentError(KvasirError):
    """A split destination resolved outside the output root."""

    def __init__(self, path: Path | str, root: Path | str):
        self.path = Path(path)
        self.root = Path(root)
        super().__init__(f"Path escape detected: {self.path} is not inside {self.root}")


class WriteConflictError(KvasirError):
    """The destination exists and overwriting was not allowed."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"{self.path} already exists (use --allow-overwrite to replace it)")


class OutputDirectoryError(KvasirError):
    """The output root is missing or is not a directory."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Output directory does not exist: {self.path}")
