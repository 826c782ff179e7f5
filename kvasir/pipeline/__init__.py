"""Discovery -> parse -> aggregate pipeline."""

from kvasir.pipeline.orchestrator import parse_file, parse_files, parse_paths

__all__ = ["parse_file", "parse_files", "parse_paths"]
