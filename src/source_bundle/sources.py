"""Enumerate and read the files that go into a bundle.

The file list comes from ``git ls-files`` so .gitignore is respected, then
the denylist and the extension allowlist are applied. Reads run in a thread
pool; every result is collected before anything downstream runs.
"""

import base64
import logging
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .config import BundleSettings
from .context import ProjectContext
from .errors import EnumerationError, FileReadError
from .utils import file_extension

logger = logging.getLogger(__name__)


def list_tracked_files(root: Path, warnings: Optional[List[str]] = None) -> List[str]:
    """List files tracked by git, relative to ``root``.

    Names that are not valid UTF-8 cannot be stored in the bundle; they are
    logged, appended to ``warnings`` and left out.

    Raises:
        EnumerationError: If git is missing or the command fails
    """
    try:
        result = subprocess.run(
            ["git", "ls-files", "-z"],
            cwd=root,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        raise EnumerationError(root, str(e)) from e

    if result.returncode != 0:
        error_msg = result.stderr.decode("utf-8", "replace").strip()
        raise EnumerationError(root, error_msg or f"git exited with status {result.returncode}")

    paths = []
    for raw in result.stdout.split(b"\0"):
        if not raw.strip():
            continue
        try:
            paths.append(raw.decode("utf-8"))
        except UnicodeDecodeError:
            shown = raw.decode("utf-8", "backslashreplace")
            message = f"Skipping {shown}: file name is not valid UTF-8"
            logger.warning("%s", message)
            if warnings is not None:
                warnings.append(message)
    return paths


def is_image_file(path: str, settings: BundleSettings) -> bool:
    ext = file_extension(path)
    return bool(ext) and f".{ext}" in settings.image_extensions


def is_eligible(path: str, settings: BundleSettings) -> bool:
    """Check the allowlist: known file names, text extensions, or image extensions."""
    file_name = path.rsplit("/", 1)[-1]
    if file_name in settings.include_files:
        return True
    ext = file_extension(path)
    if not ext:
        return False
    return f".{ext}" in settings.text_extensions or f".{ext}" in settings.image_extensions


def list_source_files(ctx: ProjectContext, warnings: Optional[List[str]] = None) -> List[str]:
    """Tracked files minus the denylist, restricted to the allowlist."""
    tracked = list_tracked_files(ctx.root, warnings)
    eligible = [
        p for p in tracked
        if not ctx.should_ignore(p) and is_eligible(p, ctx.settings)
    ]
    logger.debug("%d tracked files, %d eligible", len(tracked), len(eligible))
    return eligible


def image_mime_type(path: str) -> str:
    ext = file_extension(path)
    if ext == "svg":
        return "image/svg+xml"
    if ext == "jpg":
        return "image/jpeg"
    return f"image/{ext}"


def encode_image(path: str, data: bytes) -> str:
    """Encode image bytes as a base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{image_mime_type(path)};base64,{encoded}"


@dataclass
class ReadResult:
    """Contents of every file that could be read."""
    files: Dict[str, str] = field(default_factory=dict)
    images: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def read_source(ctx: ProjectContext, path: str) -> Tuple[str, str]:
    """Read one file.

    Returns:
        ("image", data_uri) or ("text", content)

    Raises:
        FileReadError: If the file cannot be read or is not valid UTF-8
    """
    try:
        data = ctx.absolute(path).read_bytes()
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e)) from e

    if is_image_file(path, ctx.settings):
        return "image", encode_image(path, data)

    try:
        # Decode bytes directly so line endings are kept as-is
        return "text", data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileReadError(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e


def read_sources(ctx: ProjectContext, paths: Sequence[str]) -> ReadResult:
    """Read all files concurrently.

    Failed reads are logged and reported in ``warnings``; the file is left
    out of the result and the run continues.
    """
    result = ReadResult()

    def read_one(path: str):
        try:
            return path, read_source(ctx, path), None
        except FileReadError as e:
            return path, None, e

    with ThreadPoolExecutor(max_workers=ctx.settings.max_workers) as executor:
        futures = [executor.submit(read_one, p) for p in paths]
        for future in futures:
            path, content, error = future.result()
            if error is not None:
                logger.warning("%s", error)
                result.warnings.append(str(error))
                continue
            kind, value = content
            if kind == "image":
                result.images[path] = value
            else:
                result.files[path] = value

    return result
