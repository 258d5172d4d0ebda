"""Project context for managing paths and ignore rules."""

from pathlib import Path
from typing import Optional, Union

from .config import BundleSettings, load_bundle_config
from .ignore import IgnoreSpec


class ProjectContext:
    """Resolves project-relative locations for one bundle run."""

    def __init__(self, root: Optional[Path] = None, settings: Optional[BundleSettings] = None):
        """Initialize context for a project root.

        Args:
            root: Project root (defaults to the current directory)
            settings: Bundle settings (defaults to .source-bundle.yaml or built-in defaults)
        """
        self.root = Path(root or Path.cwd()).resolve()
        if not self.root.is_dir():
            raise ValueError(f"Project root {self.root} is not a directory")
        self.settings = settings if settings is not None else load_bundle_config(self.root)
        self._ignore_spec: Optional[IgnoreSpec] = None

    def absolute(self, project_path: Union[str, Path]) -> Path:
        """Get absolute path from project-relative path."""
        return self.root / project_path

    @property
    def snapshot_path(self) -> Path:
        """Get path to the snapshot file."""
        return self.absolute(self.settings.snapshot_file)

    @property
    def output_path(self) -> Path:
        """Get path to the generated bundle."""
        return self.absolute(self.settings.output_path)

    def get_ignore_spec(self) -> IgnoreSpec:
        """Get the ignore specification (memoized).

        Private files, the configured output and snapshot files, and config
        excludes are added on top of the defaults.
        """
        if self._ignore_spec is None:
            extra = list(self.settings.private_files)
            for generated in (self.settings.output_path, self.settings.snapshot_file):
                pattern = self._anchored(generated)
                if pattern:
                    extra.append(pattern)
            extra.extend(self.settings.exclude)
            self._ignore_spec = IgnoreSpec(self.root, extra)
        return self._ignore_spec

    def should_ignore(self, relpath: Union[str, Path]) -> bool:
        """Check if a path should be ignored.

        Args:
            relpath: Either a project-relative POSIX string or a Path
        """
        if isinstance(relpath, Path):
            relpath = relpath.as_posix()
        return self.get_ignore_spec().is_ignored(relpath)

    def _anchored(self, location: str) -> Optional[str]:
        """Root-anchored ignore pattern for a file inside the project, else None."""
        path = Path(location)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self.root)
            except ValueError:
                return None
        return "/" + path.as_posix()
