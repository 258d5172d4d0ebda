"""Gitignore-style denylist for source-bundle."""

from pathlib import Path
from typing import Iterable

from pathspec import GitIgnoreSpec

from .constants import IGNORE_FILE, SNAPSHOT_FILE


# Default patterns to always ignore, even when tracked by git
DEFAULTS = [
    # Dependencies
    "node_modules/",

    # Lock files and logs
    "*.lock",
    "*.log",

    # Previously generated artifacts
    "source-code.ts",
    SNAPSHOT_FILE,

    # Repository and IDE config (not useful for source viewing)
    "/.github/",
    "/.vscode/",
    "/.idea/",
]


class IgnoreSpec:
    """Manages gitignore-style patterns for file exclusion."""

    def __init__(self, root: Path, extra: Iterable[str] = ()):
        """Initialize ignore spec with default and custom patterns.

        Args:
            root: Project root directory
            extra: Additional patterns (private files, output paths, config excludes)
        """
        self.root = root
        patterns = list(DEFAULTS)

        # Load project-specific .sourcebundleignore if it exists
        ignore_file = root / IGNORE_FILE
        if ignore_file.exists():
            for line in ignore_file.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    patterns.append(line)

        patterns.extend(extra)
        self.patterns = patterns

        # Compile patterns once for efficiency
        self.spec = GitIgnoreSpec.from_lines(patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Check if a project-relative POSIX path should be ignored."""
        return self.spec.match_file(relpath)
