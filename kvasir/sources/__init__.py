"""Source discovery and content access."""

from kvasir.sources.contents import ContentCache, LazyContents
from kvasir.sources.discovery import list_files, static_prefix

__all__ = [
    "ContentCache",
    "LazyContents",
    "list_files",
    "static_prefix",
]
