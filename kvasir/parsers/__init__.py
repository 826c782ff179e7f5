"""Parser registry: the fixed, ordered catalog of file decoders."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from kvasir.parsers.base import FileParser, has_extension
from kvasir.parsers.models import ParseFailure, ParseOutcome, ParseSuccess
from kvasir.parsers.openapi import OpenAPIParser
from kvasir.parsers.sql import SqlParser
from kvasir.parsers.structured import (
    HoconParser,
    IniParser,
    JsonParser,
    PropertiesParser,
    TomlParser,
    XmlParser,
    YamlParser,
)

# Registration order is observable: results for one file follow it.
_BUILTIN_PARSERS: tuple[Callable[[], FileParser], ...] = (
    JsonParser,
    YamlParser,
    PropertiesParser,
    OpenAPIParser,
    TomlParser,
    IniParser,
    XmlParser,
    HoconParser,
    SqlParser,
)


def parsers(enabled: Sequence[str] | None = None) -> list[FileParser]:
    """Return parser instances in registration order.

    ``enabled`` restricts the catalog by name; an empty or missing list means
    every parser. Unknown names raise ValueError.
    """
    catalog = [factory() for factory in _BUILTIN_PARSERS]
    if not enabled:
        return catalog

    wanted = {name.lower() for name in enabled}
    unknown = wanted - {p.name for p in catalog}
    if unknown:
        raise ValueError(
            f"Unknown parsers requested: {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(parser_names())}"
        )
    return [p for p in catalog if p.name in wanted]


def parser_names() -> list[str]:
    return [factory().name for factory in _BUILTIN_PARSERS]


__all__ = [
    "FileParser",
    "HoconParser",
    "IniParser",
    "JsonParser",
    "OpenAPIParser",
    "ParseFailure",
    "ParseOutcome",
    "ParseSuccess",
    "PropertiesParser",
    "SqlParser",
    "TomlParser",
    "XmlParser",
    "YamlParser",
    "has_extension",
    "parser_names",
    "parsers",
]
