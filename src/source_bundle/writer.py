"""Serialize a SourceBundle for the viewer."""

import json
import logging
from pathlib import Path

from .core import SourceBundle
from .errors import ConfigError
from .utils import atomic_write_text

logger = logging.getLogger(__name__)


TS_INTERFACES = """\
export interface FileNode {
  name: string;
  path: string;
  type: "file" | "directory";
  size?: number;
  children?: FileNode[];
}

export interface FileChange {
  path: string;
  type: "added" | "modified" | "deleted";
  additions: number;
  deletions: number;
}

export interface VersionChanges {
  fromVersion: string | null;
  toVersion: string;
  date: string;
  changes: FileChange[];
  summary: {
    added: number;
    modified: number;
    deleted: number;
    totalAdditions: number;
    totalDeletions: number;
  };
}

export interface SourceBundle {
  generatedAt: string;
  version: string;
  tree: FileNode[];
  files: Record<string, string>;
  images: Record<string, string>;
  changes: VersionChanges | null;
  stats: {
    totalFiles: number;
    totalImages: number;
    totalSize: number;
    languages: Record<string, number>;
  };
}
"""


def render_json(bundle: SourceBundle) -> str:
    return json.dumps(bundle.to_payload(), indent=2, ensure_ascii=False) + "\n"


def render_typescript(bundle: SourceBundle) -> str:
    """Render the bundle as a TypeScript module exporting ``sourceBundle``."""
    body = json.dumps(bundle.to_payload(), indent=2, ensure_ascii=False)
    return (
        "// Auto-generated source code bundle\n"
        f"// Generated at: {bundle.generated_at}\n"
        f"// Version: {bundle.version}\n"
        "// DO NOT EDIT MANUALLY\n"
        "//\n"
        "// This bundle uses git ls-files to respect .gitignore\n"
        "\n"
        f"{TS_INTERFACES}\n"
        f"export const sourceBundle: SourceBundle = {body};\n"
        "\n"
        "export default sourceBundle;\n"
    )


RENDERERS = {
    "json": render_json,
    "ts": render_typescript,
}


def write_bundle(bundle: SourceBundle, path: Path, fmt: str = "ts") -> Path:
    """Write the bundle to ``path`` in the given format.

    Raises:
        ConfigError: If the format is unknown
        OSError: If the file cannot be written
    """
    renderer = RENDERERS.get(fmt)
    if renderer is None:
        raise ConfigError(f"Unknown output format '{fmt}'. Choose one of: {', '.join(RENDERERS)}")

    atomic_write_text(path, renderer(bundle))
    logger.info("Wrote %s bundle to %s", fmt, path)
    return path
