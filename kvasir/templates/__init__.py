"""Template rendering boundary: root template selection, helpers, context."""

from kvasir.templates.renderer import (
    DEFAULT_CONTEXT_KEY,
    TemplateRenderer,
    TemplateSet,
    build_context,
    create_environment,
    find_templates,
    select_root_template,
)

__all__ = [
    "DEFAULT_CONTEXT_KEY",
    "TemplateRenderer",
    "TemplateSet",
    "build_context",
    "create_environment",
    "find_templates",
    "select_root_template",
]
