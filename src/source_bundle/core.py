"""Core data models for source-bundle.

Attribute names are Python-style; the serialized names (aliases) are the
compatibility surface shared with the viewer that consumes the bundle and
with the snapshot file from earlier runs. Always dump with ``by_alias=True``.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .hashing import fingerprint
from .utils import get_iso_timestamp


class WireModel(BaseModel):
    """Base for models serialized under their wire names."""

    model_config = ConfigDict(populate_by_name=True)


# ============= Fingerprints & Snapshots =============

class FileRecord(WireModel):
    """Fingerprint of one text file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    hash: str
    line_count: int = Field(
        serialization_alias="lines",
        validation_alias=AliasChoices("lines", "lineCount", "line_count"),
        ge=0,
    )


class Snapshot(WireModel):
    """
    Persisted fingerprints for every tracked text file as of one version.

    Stored in .source-snapshot.json and replaced wholesale on every write.
    """

    version: str
    date: str
    files: Dict[str, FileRecord] = Field(default_factory=dict)

    @classmethod
    def from_files(
        cls,
        version: str,
        files: Mapping[str, str],
        date: Optional[str] = None,
    ) -> "Snapshot":
        """Fingerprint every text file in ``files``."""
        return cls(
            version=version,
            date=date or get_iso_timestamp(),
            files={path: fingerprint(content) for path, content in files.items()},
        )


# ============= Tree =============

class NodeKind(str, Enum):
    """Kind of tree node."""

    FILE = "file"
    DIRECTORY = "directory"


class FileNode(WireModel):
    """A file or directory in the display tree."""

    name: str
    path: str
    kind: NodeKind = Field(alias="type")
    size: Optional[int] = None
    children: Optional[List["FileNode"]] = None

    @property
    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    def to_payload(self) -> Dict[str, Any]:
        # Files carry no "children" key, unsized nodes no "size" key
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============= Change Detection =============

class ChangeKind(str, Enum):
    """Type of change between two snapshots."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"

    @property
    def rank(self) -> int:
        """Position in the report ordering: added, then modified, then deleted."""
        return _CHANGE_RANK[self]


_CHANGE_RANK = {ChangeKind.ADDED: 0, ChangeKind.MODIFIED: 1, ChangeKind.DELETED: 2}


class FileChange(WireModel):
    """Single file change with approximate line counts."""

    path: str
    kind: ChangeKind = Field(alias="type")
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)

    @property
    def sort_key(self):
        return (self.kind.rank, self.path)


class ChangeSummary(WireModel):
    """Aggregate counts over a change list."""

    added_count: int = Field(default=0, alias="added")
    modified_count: int = Field(default=0, alias="modified")
    deleted_count: int = Field(default=0, alias="deleted")
    total_additions: int = Field(default=0, alias="totalAdditions")
    total_deletions: int = Field(default=0, alias="totalDeletions")


class VersionChanges(WireModel):
    """Changes between the stored snapshot and the current file set."""

    from_version: Optional[str] = Field(default=None, alias="fromVersion")
    to_version: str = Field(alias="toVersion")
    date: str
    changes: List[FileChange] = Field(default_factory=list)
    summary: ChangeSummary = Field(default_factory=ChangeSummary)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)


# ============= Bundle =============

class BundleStats(WireModel):
    """Totals shown in the viewer header."""

    total_files: int = Field(default=0, alias="totalFiles")
    total_images: int = Field(default=0, alias="totalImages")
    total_size: int = Field(default=0, alias="totalSize")
    languages: Dict[str, int] = Field(default_factory=dict)


class SourceBundle(WireModel):
    """The generated artifact. Rebuilt from scratch on every run."""

    generated_at: str = Field(alias="generatedAt")
    version: str
    tree: List[FileNode] = Field(default_factory=list)
    files: Dict[str, str] = Field(default_factory=dict)
    images: Dict[str, str] = Field(default_factory=dict)
    changes: Optional[VersionChanges] = None
    stats: BundleStats = Field(default_factory=BundleStats)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict in the field order consumers expect.

        ``changes`` stays ``None`` (null) on first runs and same-version runs.
        """
        return {
            "generatedAt": self.generated_at,
            "version": self.version,
            "tree": [node.to_payload() for node in self.tree],
            "files": dict(self.files),
            "images": dict(self.images),
            "changes": (
                self.changes.model_dump(mode="json", by_alias=True)
                if self.changes is not None else None
            ),
            "stats": self.stats.model_dump(mode="json", by_alias=True),
        }


FileNode.model_rebuild()
