"""kvasir - source file parser and template generator."""

__version__ = "0.3.6"
