"""Service layer types for source-bundle."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .core import Snapshot, SourceBundle, VersionChanges


class BuildResult(BaseModel):
    """Result of assembling a bundle."""
    bundle: SourceBundle
    previous_version: Optional[str] = None
    same_version: bool = False
    snapshot: Optional[Snapshot] = None  # Snapshot to persist; None when the version is unchanged
    snapshot_written: bool = False
    output_path: Optional[Path] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def changes(self) -> Optional[VersionChanges]:
        return self.bundle.changes


class StatusReport(BaseModel):
    """Working tree compared against the stored snapshot, without writing anything."""
    version: str
    snapshot_version: Optional[str] = None
    snapshot_date: Optional[str] = None
    changes: Optional[VersionChanges] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def has_snapshot(self) -> bool:
        return self.snapshot_version is not None

    @property
    def up_to_date(self) -> bool:
        return self.changes is not None and not self.changes.has_changes
