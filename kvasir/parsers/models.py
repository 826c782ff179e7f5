"""Result models for decoder attempts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from kvasir.errors import KvasirError


class ParseSuccess(BaseModel):
    """A file successfully decoded by one parser.

    Serialises as ``{"path", "parser", "contents"}``; ``contents`` is whatever
    JSON-shaped tree the decoder produced.
    """

    path: str
    parser: str
    contents: Any = None


@dataclass
class ParseFailure:
    """A decoder attempt that failed. Not serialised; reported as a warning."""

    path: Path
    parser: str
    error: KvasirError

    def __str__(self) -> str:
        return f"{self.path} [{self.parser}]: {self.error}"


@dataclass
class ParseOutcome:
    """Successes and failures for one file or for a whole run."""

    successes: list[ParseSuccess] = field(default_factory=list)
    failures: list[ParseFailure] = field(default_factory=list)

    def extend(self, other: ParseOutcome) -> None:
        self.successes.extend(other.successes)
        self.failures.extend(other.failures)

    def as_json(self) -> list[dict[str, Any]]:
        return [s.model_dump(mode="json") for s in self.successes]
