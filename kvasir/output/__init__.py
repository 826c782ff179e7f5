"""Output subsystem: splits rendered documents and writes the pieces."""

from kvasir.output.models import SplitEntry, WriteReport
from kvasir.output.splitter import (
    DEFAULT_DELIMITER,
    resolve_destination,
    split_blocks,
    split_document,
)
from kvasir.output.writer import SplitFileWriter

__all__ = [
    "DEFAULT_DELIMITER",
    "SplitEntry",
    "SplitFileWriter",
    "WriteReport",
    "resolve_destination",
    "split_blocks",
    "split_document",
]
