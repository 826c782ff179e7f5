"""SQL decoder that tries several dialect grammars in turn."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from kvasir.errors import DecodeError
from kvasir.parsers.base import Contents, has_extension

logger = logging.getLogger(__name__)

# (label, sqlglot dialect). Order is the tie-break when several grammars accept a file.
DIALECTS: tuple[tuple[str, str | None], ...] = (
    ("generic", None),
    ("postgresql", "postgres"),
    ("mysql", "mysql"),
    ("sqlite", "sqlite"),
    ("mssql", "tsql"),
    ("hive", "hive"),
)

# Expressions sqlglot accepts at statement level that no SQL script is made of,
# e.g. prose like "hello world" parses as an alias of a column.
_BARE_EXPRESSIONS = (exp.Alias, exp.Column, exp.Identifier, exp.Literal, exp.Condition)


def _looks_like_sql(statements: list) -> bool:
    if not statements:
        return True
    if any(isinstance(stmt, _BARE_EXPRESSIONS) for stmt in statements):
        return False
    return not all(isinstance(stmt, exp.Command) for stmt in statements)


class SqlParser:
    """Parses SQL scripts into statement trees.

    Dialects are attempted in DIALECTS order and the first one that accepts
    the whole script wins. Rejections by earlier dialects are only logged at
    debug level; if every dialect rejects the script, one DecodeError is
    raised.
    """

    name = "sql"
    extensions = ("sql",)

    def __init__(self, dialects: tuple[tuple[str, str | None], ...] = DIALECTS) -> None:
        self.dialects = dialects

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        text = contents()
        for label, dialect in self.dialects:
            logger.debug("  parsing %s with sql dialect %s", path, label)
            try:
                statements = [s for s in sqlglot.parse(text, read=dialect) if s is not None]
            except SqlglotError as e:
                logger.debug("  %s dialect rejected %s: %s", label, path, e)
                continue
            if not _looks_like_sql(statements):
                logger.debug("  %s dialect read %s as bare expressions", label, path)
                continue
            logger.debug("  %s dialect accepted %s", label, path)
            return [stmt.dump() for stmt in statements]

        tried = ", ".join(label for label, _ in self.dialects)
        raise DecodeError(self.name, path, f"Could not parse with any SQL dialect ({tried})")
