"""High-level service that assembles source bundles."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from .context import ProjectContext
from .core import BundleStats, Snapshot, SourceBundle
from .diffing import compute_changes
from .errors import SnapshotWriteError
from .service_types import BuildResult, StatusReport
from .snapshot import Loaded, SnapshotStore, should_compare, should_write
from .sources import list_source_files, read_sources
from .tree import annotate_sizes, build_tree, estimate_image_size
from .utils import file_extension, get_iso_timestamp
from .version import resolve_version
from .writer import write_bundle

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BundleDeps:
    """Dependency injection container for testability."""
    ctx: ProjectContext
    store: SnapshotStore
    now: Callable[[], datetime] = _utcnow


def compute_stats(files: Mapping[str, str], images: Mapping[str, str]) -> BundleStats:
    """Totals and per-extension counts. Languages count text files only."""
    text_size = sum(len(content) for content in files.values())
    image_size = sum(estimate_image_size(uri) for uri in images.values())

    languages: Dict[str, int] = {}
    for path in files:
        ext = file_extension(path) or "other"
        languages[ext] = languages.get(ext, 0) + 1

    return BundleStats(
        total_files=len(files),
        total_images=len(images),
        total_size=text_size + image_size,
        languages=languages,
    )


class BundleService:
    """Builds the source bundle for one project.

    One instance serves one sequential run. Concurrent runs against the same
    snapshot file are not supported.
    """

    def __init__(self, root: Optional[Path] = None, deps: Optional[BundleDeps] = None):
        """Initialize with a project root OR deps.

        Args:
            root: Project root (defaults to the current directory)
            deps: Full dependency injection (for testing)
        """
        if deps is None:
            ctx = ProjectContext(root)
            deps = BundleDeps(ctx=ctx, store=SnapshotStore(ctx.snapshot_path))
        self.deps = deps

    @property
    def ctx(self) -> ProjectContext:
        return self.deps.ctx

    def build(self, version: Optional[str] = None, *, write_snapshot: bool = True) -> BuildResult:
        """Assemble the bundle and, when the version changed, persist a new snapshot.

        Args:
            version: Version label (resolved from project manifests if None)
            write_snapshot: Persist the snapshot as part of the build

        Returns:
            BuildResult with the bundle and any non-fatal warnings

        Raises:
            EnumerationError: If the tracked-file list cannot be obtained
        """
        label = resolve_version(self.ctx.root, version)
        now = self.deps.now()

        warnings: List[str] = []
        paths = list_source_files(self.ctx, warnings)
        read = read_sources(self.ctx, paths)
        warnings.extend(read.warnings)
        logger.debug("Read %d text files and %d images", len(read.files), len(read.images))

        # Unreadable files are left out of the tree as well
        tree = build_tree(list(read.files) + list(read.images))
        annotate_sizes(tree, read.files, read.images)

        previous = self.deps.store.load()
        changes = None
        if should_compare(previous, label):
            changes = compute_changes(previous.snapshot, read.files, label, now=now)

        pending = None
        if should_write(previous, label):
            pending = Snapshot.from_files(label, read.files, date=get_iso_timestamp(now))

        bundle = SourceBundle(
            generated_at=get_iso_timestamp(now),
            version=label,
            tree=tree,
            files=read.files,
            images=read.images,
            changes=changes,
            stats=compute_stats(read.files, read.images),
        )

        result = BuildResult(
            bundle=bundle,
            previous_version=previous.version,
            same_version=isinstance(previous, Loaded) and previous.version == label,
            snapshot=pending,
            warnings=warnings,
        )
        if write_snapshot:
            self.save_snapshot(result)
        return result

    def save_snapshot(self, result: BuildResult) -> bool:
        """Persist the pending snapshot of a build.

        A write failure is reported as a warning; the bundle stays valid.

        Returns:
            True if a snapshot was written
        """
        if result.snapshot is None or result.snapshot_written:
            return False
        try:
            self.deps.store.save(result.snapshot)
        except SnapshotWriteError as e:
            logger.warning("%s", e)
            result.warnings.append(str(e))
            return False
        result.snapshot_written = True
        return True

    def generate(
        self,
        version: Optional[str] = None,
        output: Optional[Path] = None,
        fmt: Optional[str] = None,
        *,
        write_snapshot: bool = True,
    ) -> BuildResult:
        """Build the bundle, write it to disk, then persist the snapshot.

        The snapshot is saved only after the bundle file is written, so a
        failed output write leaves the previous snapshot untouched.

        Raises:
            EnumerationError: If the tracked-file list cannot be obtained
            ConfigError: If the output format is unknown
            OSError: If the bundle file cannot be written
        """
        result = self.build(version, write_snapshot=False)
        result.output_path = write_bundle(
            result.bundle,
            Path(output) if output else self.ctx.output_path,
            fmt or self.ctx.settings.format,
        )
        if write_snapshot:
            self.save_snapshot(result)
        return result

    def status(self, version: Optional[str] = None) -> StatusReport:
        """Compare the working tree with the stored snapshot, regardless of version.

        Nothing is written.
        """
        label = resolve_version(self.ctx.root, version)
        warnings: List[str] = []
        paths = list_source_files(self.ctx, warnings)
        read = read_sources(self.ctx, paths)
        warnings.extend(read.warnings)

        previous = self.deps.store.load()
        if not isinstance(previous, Loaded):
            return StatusReport(version=label, warnings=warnings)

        return StatusReport(
            version=label,
            snapshot_version=previous.version,
            snapshot_date=previous.snapshot.date,
            changes=compute_changes(previous.snapshot, read.files, label, now=self.deps.now()),
            warnings=warnings,
        )
