"""Diff computation between the stored snapshot and the current file set."""

from datetime import datetime
from typing import Iterable, List, Mapping, Optional

from .core import (
    ChangeKind,
    ChangeSummary,
    FileChange,
    Snapshot,
    VersionChanges,
)
from .hashing import count_lines, hash_content
from .utils import get_iso_timestamp


def compute_changes(
    previous: Optional[Snapshot],
    current: Mapping[str, str],
    to_version: str,
    now: Optional[datetime] = None,
) -> Optional[VersionChanges]:
    """
    Compare current file contents against a previous snapshot.

    Args:
        previous: Stored snapshot, or None on a first run.
        current: Mapping of path to text for every current text file.
        to_version: Version label of this run.
        now: Timestamp for the report (defaults to the current time).

    Returns:
        VersionChanges ordered by kind then path, or None when there is no
        previous snapshot. A first run is not reported as "everything added".

    Note:
        Modified files get approximate counts: the line delta goes to the
        growing side and half of it (rounded down) is added to both sides.
        No line-by-line comparison is done.
    """
    if previous is None:
        return None

    changes: List[FileChange] = []

    for path, content in current.items():
        prev = previous.files.get(path)

        if prev is None:
            changes.append(FileChange(
                path=path,
                kind=ChangeKind.ADDED,
                additions=count_lines(content),
                deletions=0,
            ))
        elif prev.hash != hash_content(content):
            new_lines = count_lines(content)
            old_lines = prev.line_count
            half = abs(new_lines - old_lines) // 2
            changes.append(FileChange(
                path=path,
                kind=ChangeKind.MODIFIED,
                additions=max(0, new_lines - old_lines) + half,
                deletions=max(0, old_lines - new_lines) + half,
            ))

    for path, prev in previous.files.items():
        if path not in current:
            changes.append(FileChange(
                path=path,
                kind=ChangeKind.DELETED,
                additions=0,
                deletions=prev.line_count,
            ))

    changes.sort(key=lambda c: c.sort_key)

    return VersionChanges(
        from_version=previous.version,
        to_version=to_version,
        date=get_iso_timestamp(now),
        changes=changes,
        summary=summarize(changes),
    )


def summarize(changes: Iterable[FileChange]) -> ChangeSummary:
    """Count changes per kind and total the line estimates."""
    summary = ChangeSummary()
    for change in changes:
        if change.kind == ChangeKind.ADDED:
            summary.added_count += 1
        elif change.kind == ChangeKind.MODIFIED:
            summary.modified_count += 1
        elif change.kind == ChangeKind.DELETED:
            summary.deleted_count += 1
        summary.total_additions += change.additions
        summary.total_deletions += change.deletions
    return summary
