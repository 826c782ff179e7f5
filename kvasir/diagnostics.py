"""Diagnostic sink shared by pipeline stages, plus logging setup."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "kvasir"
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOG_ENV_VAR = "KVASIR_LOG"


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal problem reported by a stage."""

    stage: str
    message: str
    path: str | None = None

    def __str__(self) -> str:
        if self.path:
            return f"[{self.stage}] {self.path}: {self.message}"
        return f"[{self.stage}] {self.message}"


@dataclass
class DiagnosticSink:
    """Collects warnings from discovery, parsing and writing.

    Every warning is also forwarded to a logger, so a sink created without
    arguments behaves like plain module logging while still letting callers
    inspect what went wrong afterwards.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(_LOGGER_NAME))
    records: list[Diagnostic] = field(default_factory=list)

    def warn(self, stage: str, message: str, *, path: Path | str | None = None) -> None:
        record = Diagnostic(stage=stage, message=message, path=str(path) if path else None)
        self.records.append(record)
        self.logger.warning("%s", record)

    def info(self, message: str, *args: object) -> None:
        self.logger.info(message, *args)

    def debug(self, message: str, *args: object) -> None:
        self.logger.debug(message, *args)

    def for_stage(self, stage: str) -> list[Diagnostic]:
        return [r for r in self.records if r.stage == stage]

    def __len__(self) -> int:
        return len(self.records)


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def resolve_log_level(*, debug: bool = False, configured: str = "warn") -> int:
    """Pick the effective level: --debug > $KVASIR_LOG > configured value."""
    if debug:
        return logging.DEBUG
    env_value = os.environ.get(LOG_ENV_VAR, "").strip().lower()
    if env_value in _LEVELS:
        return _LEVELS[env_value]
    return _LEVELS.get(configured.lower(), logging.WARNING)


def configure_logging(level: int = logging.WARNING, fmt: str = "text") -> logging.Logger:
    """Route the kvasir logger hierarchy to stderr."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process don't duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonLineFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger


__all__ = [
    "Diagnostic",
    "DiagnosticSink",
    "LOG_ENV_VAR",
    "configure_logging",
    "resolve_log_level",
]
