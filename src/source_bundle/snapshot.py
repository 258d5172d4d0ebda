"""Persisted snapshot of file fingerprints.

The store is an explicit value owned by whoever builds the bundle; there is
no process-wide snapshot state. Loading never raises: a missing file and a
corrupt file both come back as ``Absent`` so callers treat them the same way
as a first run.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .core import Snapshot
from .errors import SnapshotWriteError
from .utils import atomic_write_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loaded:
    """A previous snapshot was read successfully."""
    snapshot: Snapshot

    @property
    def version(self) -> str:
        return self.snapshot.version


@dataclass(frozen=True)
class Absent:
    """No usable previous snapshot (missing or unreadable)."""
    reason: str = "missing"

    @property
    def version(self) -> Optional[str]:
        return None


SnapshotLoad = Union[Loaded, Absent]


class SnapshotStore:
    """Loads and saves the single snapshot file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> SnapshotLoad:
        """Return the stored snapshot, or ``Absent`` if there is none usable."""
        if not self.path.exists():
            return Absent()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            snapshot = Snapshot.model_validate(data)
        except (OSError, UnicodeDecodeError, ValueError, ValidationError) as e:
            logger.debug("Ignoring unreadable snapshot %s: %s", self.path, e)
            return Absent(reason=f"unreadable: {e}")

        return Loaded(snapshot)

    def save(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot.

        Raises:
            SnapshotWriteError: If the file cannot be written
        """
        text = json.dumps(snapshot.model_dump(mode="json", by_alias=True), indent=2)
        try:
            atomic_write_text(self.path, text)
        except OSError as e:
            raise SnapshotWriteError(self.path, str(e)) from e
        logger.debug("Saved snapshot for version %s (%d files)", snapshot.version, len(snapshot.files))


def should_compare(previous: SnapshotLoad, version: str) -> bool:
    """Changes are reported only against a snapshot of a different version."""
    return isinstance(previous, Loaded) and previous.version != version


def should_write(previous: SnapshotLoad, version: str) -> bool:
    """A snapshot is written on the first run and whenever the version changes.

    Rebuilding the same version leaves the previous version's snapshot in
    place so the next release still diffs against it.
    """
    return isinstance(previous, Absent) or previous.version != version
