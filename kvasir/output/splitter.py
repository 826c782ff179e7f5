"""Split one rendered document into many destination files.

A rendered document addresses files with delimiter lines::

    8<-- docs/a.md
    body of a
    8<-- docs/b.md
    body of b

Text before the first delimiter is not addressed to any file and is dropped.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from kvasir.errors import OutputDirectoryError, PathContainmentError
from kvasir.output.models import SplitEntry

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "8<--"


def split_blocks(document: str, delimiter: str = DEFAULT_DELIMITER) -> list[tuple[str, str]]:
    """Return ``(relative_path, body)`` pairs in document order.

    The first line of each block, stripped, is the path; the remaining lines
    joined with the platform line separator are the body. Blank blocks are
    skipped.
    """
    if not delimiter:
        raise ValueError("split delimiter must not be empty")

    blocks: list[tuple[str, str]] = []
    for block in document.split(delimiter)[1:]:
        if not block.strip():
            continue
        lines = block.splitlines()
        rel_path = lines[0].strip()
        body = os.linesep.join(lines[1:])
        blocks.append((rel_path, body))
    return blocks


def resolve_destination(root: Path, rel_path: str) -> Path:
    """Join ``rel_path`` onto ``root`` and normalise it, enforcing containment.

    Normalisation (collapsing ``.``, ``..`` and doubled separators) happens
    before the check so an escaping path can't pass by looking nested.
    Symlinks inside the root are followed for a second check.
    """
    normalized = Path(os.path.normpath(os.path.join(root, rel_path)))
    if normalized == root or not normalized.is_relative_to(root):
        raise PathContainmentError(normalized, root)
    if not normalized.resolve().is_relative_to(root.resolve()):
        raise PathContainmentError(normalized, root)
    return normalized


def split_document(
    document: str,
    output_root: Path | str,
    delimiter: str = DEFAULT_DELIMITER,
) -> list[SplitEntry]:
    """Turn a rendered document into validated SplitEntry values.

    All-or-nothing: if any destination escapes ``output_root`` a
    PathContainmentError is raised and no entries are returned, so nothing
    from this document gets written.
    """
    root = Path(os.path.normpath(os.path.abspath(output_root)))
    if not root.is_dir():
        raise OutputDirectoryError(root)

    entries = [
        SplitEntry(path=resolve_destination(root, rel_path), body=body)
        for rel_path, body in split_blocks(document, delimiter)
    ]
    logger.debug("split document into %d file(s) under %s", len(entries), root)
    return entries
