"""Root template selection and Jinja2 rendering."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from kvasir.diagnostics import DiagnosticSink
from kvasir.errors import TemplateError
from kvasir.parsers import ParseSuccess
from kvasir.sources import list_files, static_prefix
from kvasir.templates.filters import FILTERS, GLOBALS

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_KEY = "files"


@dataclass(frozen=True)
class TemplateSet:
    """Templates matched by one glob, named relative to the glob's static prefix."""

    root_dir: Path
    names: list[str]


def find_templates(pattern: str, sink: DiagnosticSink | None = None) -> TemplateSet:
    files, _errors = list_files([pattern], sink)
    root_dir = static_prefix(pattern)
    names: list[str] = []
    for f in files:
        try:
            names.append(f.relative_to(root_dir).as_posix())
        except ValueError:
            names.append(f.as_posix())
    return TemplateSet(root_dir=root_dir, names=sorted(names))


def select_root_template(
    pattern: str,
    names: Sequence[str],
    override: str | None = None,
    sink: DiagnosticSink | None = None,
) -> str:
    """Choose the entry-point template.

    One match is used as-is. With several matches the explicit ``override``
    wins; without one, the first name in sorted order is used and a warning
    is reported.
    """
    sink = sink or DiagnosticSink(logger)
    if not names:
        raise TemplateError(f"No templates found for glob expression: {pattern}")

    if override is not None:
        wanted = Path(override).as_posix()
        if wanted not in names:
            raise TemplateError(
                f"Root template {override!r} not found among: {', '.join(names)}"
            )
        return wanted

    if len(names) == 1:
        return names[0]

    first = names[0]
    sink.warn("template", f"No root template specified. Using first template found: {first}")
    return first


def create_environment(root_dir: Path) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(root_dir)),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters.update(FILTERS)
    env.globals.update(GLOBALS)
    return env


def build_context(
    successes: Sequence[ParseSuccess], key: str = DEFAULT_CONTEXT_KEY
) -> dict[str, Any]:
    return {key: [s.model_dump(mode="json") for s in successes]}


class TemplateRenderer:
    """Renders one root template against the aggregated parse results."""

    def __init__(
        self,
        pattern: str,
        root_template: str | None = None,
        *,
        context_key: str = DEFAULT_CONTEXT_KEY,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.pattern = pattern
        self.context_key = context_key
        self._sink = sink or DiagnosticSink(logger)
        self.templates = find_templates(pattern, self._sink)
        self.root_template = select_root_template(
            pattern, self.templates.names, root_template, self._sink
        )
        self.env = create_environment(self.templates.root_dir)

    def render(self, successes: Sequence[ParseSuccess]) -> str:
        context = build_context(successes, self.context_key)
        try:
            template = self.env.get_template(self.root_template)
            return template.render(context)
        except Exception as e:
            # jinja2 errors, plus whatever a misused helper raises
            raise TemplateError(f"Could not render template {self.root_template}: {e}") from e
