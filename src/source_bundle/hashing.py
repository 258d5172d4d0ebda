"""Content fingerprints for change detection.

A fingerprint is a short content hash plus a line count. Hashes are only
compared for equality within one project, so the SHA-256 hex digest is
truncated to ``HASH_LENGTH`` characters.
"""

import hashlib
from typing import TYPE_CHECKING

from .constants import HASH_LENGTH

if TYPE_CHECKING:
    from .core import FileRecord


def hash_content(content: str) -> str:
    """Compute the truncated SHA-256 of the UTF-8 encoded text.

    Args:
        content: File text exactly as read (no newline translation)

    Returns:
        First ``HASH_LENGTH`` lowercase hex characters of the digest
    """
    digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
    return digest[:HASH_LENGTH]


def count_lines(content: str) -> int:
    """Count newline-delimited segments.

    A trailing newline yields an extra empty segment, so ``"a\\n"`` has two
    lines and the empty string has one. The modified-file heuristic in
    ``diffing`` depends on this exact rule.
    """
    return len(content.split("\n"))


def fingerprint(content: str) -> "FileRecord":
    """Compute the ``FileRecord`` for a file's text."""
    from .core import FileRecord

    return FileRecord(hash=hash_content(content), line_count=count_lines(content))


__all__ = [
    "hash_content",
    "count_lines",
    "fingerprint",
]
