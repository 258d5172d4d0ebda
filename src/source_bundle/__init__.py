"""Versioned source snapshots and change tracking for in-app source viewers."""

from .bundle_service import BundleDeps, BundleService
from .core import (
    ChangeKind,
    FileChange,
    FileNode,
    FileRecord,
    Snapshot,
    SourceBundle,
    VersionChanges,
)
from .diffing import compute_changes
from .hashing import count_lines, fingerprint, hash_content
from .snapshot import Absent, Loaded, SnapshotStore
from .tree import build_tree

__version__ = "0.1.0"

__all__ = [
    "BundleDeps",
    "BundleService",
    "ChangeKind",
    "FileChange",
    "FileNode",
    "FileRecord",
    "Snapshot",
    "SourceBundle",
    "VersionChanges",
    "compute_changes",
    "count_lines",
    "fingerprint",
    "hash_content",
    "Absent",
    "Loaded",
    "SnapshotStore",
    "build_tree",
]
