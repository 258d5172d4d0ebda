"""Custom exceptions for source-bundle.

Only enumeration and configuration failures abort a run. Read and snapshot
write failures are caught by the bundle service and reported as warnings.
"""


class SourceBundleError(RuntimeError):
    """Base class for all source-bundle errors."""
    pass


class EnumerationError(SourceBundleError):
    """The tracked-file list could not be obtained."""

    def __init__(self, root, detail: str):
        self.root = root
        self.detail = detail
        super().__init__(
            f"Could not list tracked files in {root}: {detail}\n"
            f"source-bundle reads the file list from 'git ls-files'; "
            f"make sure git is installed and the directory is a git work tree."
        )


class FileReadError(SourceBundleError):
    """A single source file could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}")


class SnapshotWriteError(SourceBundleError):
    """The snapshot could not be persisted."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Could not write snapshot to {path}: {reason}. "
            f"The bundle was generated but the next run will compare against the old snapshot."
        )


class ConfigError(SourceBundleError):
    """Invalid configuration."""
    pass
